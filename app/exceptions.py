# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error body has the same envelope the frontend already expects:
#   {"success": false, "error": "...", "code": "...", "suggestion": "..."}
#
# Error messages must never include the API secret or any Supabase key.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class MediaSignerException(Exception):
    """
    Base exception for the Media Signer API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MEDIA_SIGNER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Exceptions (client errors, never retried)
# =============================================================================

class SigningValidationError(MediaSignerException):
    """Raised when the URL or the requested mode cannot be signed."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


class MissingUrlError(SigningValidationError):
    """Raised when the request carries no url parameter."""

    def __init__(self):
        super().__init__(
            message="Missing url",
            code="MISSING_URL",
            suggestion="Pass the Cloudinary delivery URL as the 'url' query parameter",
        )


class InvalidUrlError(SigningValidationError):
    """Raised when the URL is not an absolute http(s) URL."""

    def __init__(self, reason: str = "Invalid URL protocol"):
        super().__init__(
            message=reason,
            code="INVALID_URL",
            suggestion="Use an absolute http:// or https:// delivery URL",
        )


class HostMismatchError(SigningValidationError):
    """Raised when the URL host is not on the CDN domain."""

    def __init__(self, host: str, cdn_domain: str):
        super().__init__(
            message="Invalid Cloudinary host",
            code="HOST_MISMATCH",
            suggestion=f"Only URLs served from *.{cdn_domain} can be signed",
            details={"host": host},
        )


class InvalidFormatError(SigningValidationError):
    """Raised when the path lacks cloud name, resource type or delivery type."""

    def __init__(self):
        super().__init__(
            message="Invalid Cloudinary URL format",
            code="INVALID_FORMAT",
            suggestion="Expected /<cloud_name>/<resource_type>/<delivery_type>/<asset path>",
        )


class CloudNameMismatchError(SigningValidationError):
    """Raised when the URL belongs to another tenant."""

    def __init__(self, cloud_name: str):
        super().__init__(
            message="Cloud name mismatch",
            code="CLOUD_NAME_MISMATCH",
            suggestion="Only assets from this site's own Cloudinary account can be signed",
            details={"cloud_name": cloud_name},
        )


class MissingAssetPathError(SigningValidationError):
    """Raised when nothing is left of the path after the delivery type."""

    def __init__(self):
        super().__init__(
            message="Missing Cloudinary asset path",
            code="MISSING_ASSET_PATH",
            suggestion="The URL must point at an asset, not at a delivery type folder",
        )


class UnsupportedDeliveryTypeError(SigningValidationError):
    """Raised when the delivery type is not allowed for the chosen mode."""

    def __init__(self, delivery_type: str, allowed: list[str], mode: str):
        super().__init__(
            message=f"Unsupported Cloudinary delivery type for {mode} signing: {delivery_type}",
            code="UNSUPPORTED_DELIVERY_TYPE",
            suggestion=f"Supported delivery types: {', '.join(allowed)}",
            details={"delivery_type": delivery_type, "allowed": allowed, "mode": mode},
        )


# =============================================================================
# Configuration Exceptions (operator errors)
# =============================================================================

class ConfigurationError(MediaSignerException):
    """
    Raised when a required setting is missing.

    Only the setting's NAME is reported, never its value.
    """

    def __init__(self, setting: str):
        super().__init__(
            message=f"Missing env: {setting}",
            code="SERVER_MISCONFIGURED",
            status_code=500,
            suggestion=f"Set {setting} in the server environment or .env file",
        )


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationError(MediaSignerException):
    """Raised when the bearer token is missing or rejected by Supabase."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Sign in again and send the access token as 'Authorization: Bearer <token>'",
        )


class AuthServiceUnavailableError(MediaSignerException):
    """Raised when tokens cannot be verified (Supabase unset or unreachable)."""

    def __init__(self, message: str | None = None, code: str = "AUTH_NOT_CONFIGURED"):
        super().__init__(
            message=message or (
                "Supabase server env is not configured "
                "(need SUPABASE_URL and either SUPABASE_SERVICE_KEY or SUPABASE_ANON_KEY)"
            ),
            code=code,
            status_code=503,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def media_signer_exception_handler(
    request: Request,
    exc: MediaSignerException
) -> JSONResponse:
    """
    Convert MediaSignerException to JSON response.

    Returns structured error with:
    - success: always false
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"Rejected {request.url.path}: {exc.code}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors (bad query parameters).

    Reported as 400 in the shared envelope rather than FastAPI's default 422.
    """
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request parameters",
            "code": "VALIDATION_ERROR",
            "details": {"fields": fields},
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Wrap framework HTTP errors (404, 405, ...) in the shared envelope.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "code": f"HTTP_{exc.status_code}",
        },
        headers=getattr(exc, "headers", None),
    )
