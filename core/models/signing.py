# =============================================================================
# core/models/signing.py - Signed URL Schemas
# =============================================================================
# These models carry one signing request through the pipeline:
# - CloudinaryConfig: tenant + credentials, built once at startup
# - ParsedDeliveryUrl: a delivery URL split into its fields
# - SigningRequest: the parameter set for a Download-API signature
# - SignedResult: the authorized URL handed back to the caller
#
# Flow:
#   raw url -> ParsedDeliveryUrl -> canonical path / SigningRequest
#           -> signature -> SignedResult
#
# Every model is frozen. None of them outlives the request that built it.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeliveryType(str, Enum):
    """
    Access class of an asset on the CDN.

    - upload: Public, fetchable by anyone
    - authenticated: Needs a signed URL or a valid session context
    - private: Needs a signed URL
    """
    UPLOAD = "upload"
    AUTHENTICATED = "authenticated"
    PRIVATE = "private"


class SigningMode(str, Enum):
    """
    Which kind of authorized URL was produced.

    - delivery: s--<token>-- segment verified at the CDN edge
    - download_api: key-authenticated call to the central download endpoint
    """
    DELIVERY = "delivery"
    DOWNLOAD_API = "download_api"


# Delivery-Path signing is only meaningful for non-public assets
DELIVERY_SIGNABLE_TYPES = frozenset({DeliveryType.AUTHENTICATED, DeliveryType.PRIVATE})

# The download endpoint accepts every delivery type
DOWNLOAD_API_TYPES = frozenset(DeliveryType)


class CloudinaryConfig(BaseModel):
    """
    Immutable Cloudinary settings injected into SigningService.

    Built once from app settings. The secret is kept out of repr() so the
    object can appear in logs and tracebacks safely.
    """

    model_config = ConfigDict(frozen=True)

    cloud_name: str = Field(default="", description="Tenant cloud name")
    api_key: str = Field(default="", description="API key (Download-API mode only)")
    api_secret: str = Field(default="", repr=False, description="Shared signing secret")
    cdn_domain: str = Field(default="cloudinary.com", description="Allowed delivery host suffix")
    download_api_base_url: str = Field(
        default="https://api.cloudinary.com/v1_1",
        description="Base URL of the download endpoint (no trailing slash)"
    )


class ParsedDeliveryUrl(BaseModel):
    """
    A CDN delivery URL broken into its path components.

    Example:
        https://res.cloudinary.com/acme/image/authenticated/s--abc--/v123/folder/photo.jpg
        -> cloud_name="acme", resource_type="image", delivery_type="authenticated",
           version="v123", asset_path="folder/photo.jpg"

    The stale signature segment is dropped, never kept.
    """

    model_config = ConfigDict(frozen=True)

    protocol: str = Field(..., pattern=r"^https?$", description="http or https")
    host: str = Field(..., min_length=1, description="Delivery host, e.g. res.cloudinary.com")
    cloud_name: str = Field(..., min_length=1)
    resource_type: str = Field(..., min_length=1, description="image, video, raw, ...")
    delivery_type: str = Field(..., min_length=1, description="upload, authenticated, private, ...")
    asset_path: str = Field(..., min_length=1, description="Path after version, including extension")
    version: str | None = Field(default=None, description="Leading vNNN segment, if the URL had one")


class SigningRequest(BaseModel):
    """
    Everything needed to sign one Download-API call.

    The timestamp must be taken at signing time. Requests are never cached
    or reused, since the endpoint rejects stale timestamps.
    """

    model_config = ConfigDict(frozen=True)

    cloud_name: str = Field(..., min_length=1)
    resource_type: str = Field(..., min_length=1)
    public_id: str = Field(..., min_length=1)
    delivery_type: DeliveryType
    api_key: str = Field(..., min_length=1)
    api_secret: str = Field(..., min_length=1, repr=False)
    timestamp: int = Field(..., ge=0, description="Epoch seconds at signing")
    attachment: bool = False
    target_filename: str | None = None


class SignedResult(BaseModel):
    """The authorized URL plus the signature embedded in it."""

    model_config = ConfigDict(frozen=True)

    url: str
    signature: str = Field(..., repr=False)
    mode: SigningMode


class SignedUrlResponse(BaseModel):
    """
    Success body of GET /api/cloudinary-signed-url.

    Example:
        {"success": true, "signedUrl": "https://res.cloudinary.com/acme/..."}
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    signed_url: str = Field(..., alias="signedUrl")


class ErrorResponse(BaseModel):
    """Failure body shared by every endpoint."""

    success: bool = False
    error: str
    code: str
    suggestion: str | None = None
    details: dict[str, Any] | None = None
