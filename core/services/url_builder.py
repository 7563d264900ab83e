# =============================================================================
# core/services/url_builder.py - Signed URL Assembly
# =============================================================================
# Builds the final authorized URLs once a signature has been computed:
# - build_signed_delivery_url: CDN URL with an s--<token>-- segment
# - build_download_api_url: central download endpoint with a signed query
#
# Also derives the public_id the download endpoint expects from an asset path.
# =============================================================================

import re
from urllib.parse import urlencode

from core.models import ParsedDeliveryUrl, SigningRequest

VERSION_SEGMENT_RE = re.compile(r"^v\d+$", re.IGNORECASE)

# One trailing extension of 1-8 alphanumerics, e.g. ".jpg", ".mp4", ".flac"
EXTENSION_RE = re.compile(r"\.[a-z0-9]{1,8}$", re.IGNORECASE)


def extract_public_id(asset_path: str) -> str:
    """
    Derive the Cloudinary public_id from an asset path.

    Drops a leading vNNN segment, then one trailing file extension.

    This is a heuristic. Known cases it gets wrong:
    - a folder literally named like a version ("v2/cover.jpg" loses "v2")
    - raw assets whose public_id keeps its extension
    - names with several dots only lose the last one ("a.tar.gz" -> "a.tar")

    Example:
        extract_public_id("v123/folder/photo.jpg") -> "folder/photo"
    """
    parts = [part for part in asset_path.split("/") if part]
    if parts and VERSION_SEGMENT_RE.match(parts[0]):
        parts = parts[1:]

    return EXTENSION_RE.sub("", "/".join(parts))


def build_signed_delivery_url(
    parsed: ParsedDeliveryUrl,
    canonical_path: str,
    token: str,
) -> str:
    """
    Rebuild the delivery URL with the signature segment in place.

    Layout:
        {protocol}://{host}/{cloud}/{resource}/{delivery}/s--{token}--/{canonical_path}
    """
    return (
        f"{parsed.protocol}://{parsed.host}/{parsed.cloud_name}/{parsed.resource_type}/"
        f"{parsed.delivery_type}/s--{token}--/{canonical_path}"
    )


def build_download_api_url(
    request: SigningRequest,
    signature: str,
    base_url: str = "https://api.cloudinary.com/v1_1",
) -> str:
    """
    Build the Download-API URL for a signed request.

    api_key and signature are added to the query here; neither is part of
    the signed payload.

    Example:
        https://api.cloudinary.com/v1_1/acme/image/download?api_key=123&public_id=folder%2Fphoto
            &timestamp=1700000000&type=authenticated&attachment=true&signature=...
    """
    query = {
        "api_key": request.api_key,
        "public_id": request.public_id,
        "timestamp": str(request.timestamp),
        "type": request.delivery_type.value,
    }
    if request.attachment:
        query["attachment"] = "true"
    if request.target_filename:
        query["target_filename"] = request.target_filename
    query["signature"] = signature

    return (
        f"{base_url.rstrip('/')}/{request.cloud_name}/{request.resource_type}/download?"
        f"{urlencode(query)}"
    )
