# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The Cloudinary config is snapshotted from settings once per process and
# handed to the signer; the signer never reads the environment itself.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from app.config import get_settings
from core.models import CloudinaryConfig
from core.services import SigningService


@lru_cache
def get_cloudinary_config() -> CloudinaryConfig:
    """
    Get the immutable Cloudinary config.

    Cached: settings are read once at first use, not per request.
    """
    return get_settings().cloudinary_config()


def get_signing_service(
    config: CloudinaryConfig = Depends(get_cloudinary_config),
) -> SigningService:
    """
    Get a signer bound to the current config.

    Cheap to build; a fresh instance per request keeps nothing shared.
    """
    return SigningService(config)


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
SigningServiceDep = Annotated[SigningService, Depends(get_signing_service)]
