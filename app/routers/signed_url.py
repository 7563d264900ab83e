# =============================================================================
# app/routers/signed_url.py - Signed URL Endpoint
# =============================================================================
# GET /api/cloudinary-signed-url
#
# Query parameters:
#   url           Cloudinary delivery URL to authorize (required)
#   download      "1"/"true": force download (adds fl_attachment)
#   download_api  "1"/"true": use the central Download API instead
#   filename      Download-API mode: filename the browser saves as
#
# The caller must be signed in; the token is checked before any signing.
# =============================================================================

import logging

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser, SigningServiceDep
from core.models import ErrorResponse, SignedUrlResponse
from lib.utils import parse_flag

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/cloudinary-signed-url",
    response_model=SignedUrlResponse,
    responses={
        400: {"model": ErrorResponse, "description": "URL cannot be signed"},
        401: {"model": ErrorResponse, "description": "Missing or invalid access token"},
        500: {"model": ErrorResponse, "description": "Server is missing Cloudinary settings"},
        503: {"model": ErrorResponse, "description": "Authentication service unavailable"},
    },
)
def get_signed_url(
    user: CurrentUser,
    signer: SigningServiceDep,
    url: str = Query(default="", description="Cloudinary delivery URL"),
    download: str | None = Query(default=None, description="Force download (1/true)"),
    download_api: str | None = Query(default=None, description="Use the Download API (1/true)"),
    filename: str | None = Query(default=None, description="Download filename (Download API only)"),
) -> SignedUrlResponse:
    """
    Return a short-lived authorized URL for a private or authenticated asset.

    Returns:
        {"success": true, "signedUrl": "..."}

    Raises:
        400: Malformed URL, wrong tenant, unsupported delivery type
        401: Not authenticated
        500: Cloudinary settings missing
    """
    use_download_api = parse_flag(download_api)

    logger.debug(f"Signing request from user {user.id} (download_api={use_download_api})")

    result = signer.sign(
        url,
        force_download=parse_flag(download),
        target_filename=filename,
        use_download_api=use_download_api,
    )
    return SignedUrlResponse(signed_url=result.url)
