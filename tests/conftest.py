# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a fixed CloudinaryConfig and a signer with a frozen clock
# - Provides a TestClient with auth and config overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "acme")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456789012345")
os.environ.setdefault("CLOUDINARY_API_SECRET", "env-secret-value")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser, get_current_user
from app.dependencies import get_cloudinary_config
from app.main import app
from core.models import CloudinaryConfig
from core.services import SigningService


# =============================================================================
# Constants
# =============================================================================

SECRET = "shh"
API_KEY = "123456789012345"
CLOUD_NAME = "acme"
CDN_DOMAIN = "example-cdn.com"
FIXED_TIMESTAMP = 1700000000

TEST_USER = AuthUser(id=UUID("550e8400-e29b-41d4-a716-446655440000"), email="artist@example.com")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def cloudinary_config() -> CloudinaryConfig:
    """Config matching the reference vectors (secret "shh", tenant "acme")."""
    return CloudinaryConfig(
        cloud_name=CLOUD_NAME,
        api_key=API_KEY,
        api_secret=SECRET,
        cdn_domain=CDN_DOMAIN,
    )


@pytest.fixture
def signer(cloudinary_config: CloudinaryConfig) -> SigningService:
    """Signer whose clock always returns FIXED_TIMESTAMP."""
    return SigningService(cloudinary_config, clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def api_client(cloudinary_config: CloudinaryConfig):
    """
    TestClient with the caller already authenticated and the test config injected.
    """
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    app.dependency_overrides[get_cloudinary_config] = lambda: cloudinary_config
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(cloudinary_config: CloudinaryConfig):
    """TestClient with the real auth dependency in place."""
    app.dependency_overrides[get_cloudinary_config] = lambda: cloudinary_config
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
