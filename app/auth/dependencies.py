# =============================================================================
# app/auth/dependencies.py - Authentication Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Tokens are verified by asking Supabase who they belong to, so revoked
# sessions are refused immediately. The signing core trusts the verdict and
# performs no check of its own.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import AuthenticationError, AuthServiceUnavailableError
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. auto_error=False so a missing header goes
# through our own error envelope instead of FastAPI's 403.
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Resolve the caller from the Authorization header.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Checks that Supabase is configured
    3. Asks Supabase which user the token belongs to
    4. Returns an AuthUser with the user's ID and email

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired
        AuthServiceUnavailableError: 503 if Supabase is unset or unreachable
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing Authorization")

    if not settings.supabase_configured:
        raise AuthServiceUnavailableError()

    try:
        user = SupabaseClient.verify_access_token(credentials.credentials)
    except SupabaseClientError as e:
        logger.error(f"Token verification failed: {e.code}")
        raise AuthServiceUnavailableError(
            message="Authentication service unavailable",
            code=e.code,
        ) from e

    if not user:
        raise AuthenticationError("Unauthorized")

    try:
        return AuthUser(id=user["id"], email=user.get("email"))
    except ValidationError as e:
        logger.warning("Supabase returned a user without a valid id")
        raise AuthenticationError("Unauthorized") from e
