# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module wraps the Supabase client used to authenticate callers.
# It implements the singleton pattern to reuse a single client connection.
#
# The signing core never talks to Supabase: the API layer verifies the
# caller's access token here first, and only then invokes the signer.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   user = SupabaseClient.verify_access_token(token)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import AuthError, Client, create_client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: says HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Thin wrapper around the Supabase auth API.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        user = SupabaseClient.verify_access_token(token)
        if user is None:
            ...  # reject with 401
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Prefers the service_role key; falls back to the anon key, which is
        still enough to resolve a user's own access token.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If not configured or client creation fails
        """
        if cls._instance is None:
            key = settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_ANON_KEY
            if not (settings.SUPABASE_URL and key):
                raise SupabaseClientError(
                    message="Supabase is not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY (or SUPABASE_ANON_KEY)"
                )
            try:
                cls._instance = create_client(settings.SUPABASE_URL, key)
                logger.info(
                    "Supabase client initialized "
                    f"({'service' if settings.SUPABASE_SERVICE_KEY else 'anon'} key)"
                )
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {type(e).__name__}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and the Supabase keys in your .env file"
                ) from e
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests and after config changes)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    @classmethod
    def verify_access_token(cls, token: str) -> dict[str, Any] | None:
        """
        Resolve an access token to the user it belongs to.

        Args:
            token: Raw JWT from the Authorization header

        Returns:
            Dict with "id" and "email" when Supabase accepts the token,
            None when Supabase rejects it

        Raises:
            SupabaseClientError: If Supabase could not be reached or answered oddly
        """
        client = cls.get_client()

        try:
            response = client.auth.get_user(token)
        except AuthError as e:
            logger.info(f"Supabase rejected access token: {e.__class__.__name__}")
            return None
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to verify access token: {type(e).__name__}",
                code="AUTH_REQUEST_FAILED",
                suggestion="Check that Supabase is reachable from this server"
            ) from e

        user = getattr(response, "user", None) if response is not None else None
        if user is None:
            return None

        return {"id": str(user.id), "email": getattr(user, "email", None)}
