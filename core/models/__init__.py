# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - signing.py: Parsed delivery URLs, signing requests and results
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Signing Models - Signed delivery / Download-API URLs
# -----------------------------------------------------------------------------
from .signing import (
    DELIVERY_SIGNABLE_TYPES,
    DOWNLOAD_API_TYPES,
    CloudinaryConfig,
    DeliveryType,
    ErrorResponse,
    ParsedDeliveryUrl,
    SignedResult,
    SignedUrlResponse,
    SigningMode,
    SigningRequest,
)

__all__ = [
    # Constants
    "DELIVERY_SIGNABLE_TYPES",
    "DOWNLOAD_API_TYPES",
    # Enums
    "DeliveryType",
    "SigningMode",
    # Models
    "CloudinaryConfig",
    "ErrorResponse",
    "ParsedDeliveryUrl",
    "SignedResult",
    "SignedUrlResponse",
    "SigningRequest",
]
