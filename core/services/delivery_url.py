# =============================================================================
# core/services/delivery_url.py - Delivery URL Parsing
# =============================================================================
# Turns a raw Cloudinary delivery URL into a ParsedDeliveryUrl and prepares
# the asset path for signing.
#
# URL layout:
#   https://res.cloudinary.com/<cloud>/<resource>/<delivery>/[s--sig--/][vNNN/]<asset path>
#
# Nothing here touches the network or the settings; the caller passes the
# expected tenant and CDN domain in.
# =============================================================================

import logging
import re
from urllib.parse import urlsplit

from app.exceptions import (
    CloudNameMismatchError,
    HostMismatchError,
    InvalidFormatError,
    InvalidUrlError,
    MissingAssetPathError,
)
from core.models import ParsedDeliveryUrl

logger = logging.getLogger(__name__)

# Existing signature segment. Tokens are base64url, so "-" is part of the alphabet.
SIGNATURE_SEGMENT_RE = re.compile(r"^s--[A-Za-z0-9_-]+--$", re.IGNORECASE)

# Leading version segment, e.g. v1712345678
VERSION_SEGMENT_RE = re.compile(r"^v\d+$", re.IGNORECASE)

# Transformation flag that makes the edge answer with Content-Disposition: attachment
ATTACHMENT_FLAG = "fl_attachment"

ALLOWED_SCHEMES = ("http", "https")


def _host_matches(hostname: str, cdn_domain: str) -> bool:
    return hostname == cdn_domain or hostname.endswith(f".{cdn_domain}")


def parse_delivery_url(
    raw_url: str,
    expected_cloud_name: str,
    cdn_domain: str = "cloudinary.com",
) -> ParsedDeliveryUrl:
    """
    Parse and validate a CDN delivery URL.

    Checks run in order and the first failure wins:
    scheme, host, path shape, tenant, asset path.

    Any s--<token>-- segment is dropped so an already signed URL can be
    signed again without stacking tokens. A leading vNNN segment is split
    off into `version`.

    Args:
        raw_url: Absolute delivery URL as sent by the client
        expected_cloud_name: The tenant this server signs for
        cdn_domain: Host suffix every delivery URL must carry

    Returns:
        ParsedDeliveryUrl with a non-empty asset_path

    Raises:
        InvalidUrlError: Not an absolute http(s) URL
        HostMismatchError: Host outside cdn_domain
        InvalidFormatError: Cloud name, resource type or delivery type missing
        CloudNameMismatchError: URL belongs to a different cloud
        MissingAssetPathError: Nothing left after stripping signature/version
    """
    try:
        parts = urlsplit(str(raw_url).strip())
        port = parts.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {e}") from e

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidUrlError()

    hostname = (parts.hostname or "").lower()
    domain = cdn_domain.lower().lstrip(".")
    if not hostname or not _host_matches(hostname, domain):
        raise HostMismatchError(host=hostname, cdn_domain=domain)

    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 3:
        raise InvalidFormatError()

    cloud_name, resource_type, delivery_type, *rest = segments

    if cloud_name != expected_cloud_name:
        raise CloudNameMismatchError(cloud_name)

    rest = [segment for segment in rest if not SIGNATURE_SEGMENT_RE.match(segment)]

    version = None
    if rest and VERSION_SEGMENT_RE.match(rest[0]):
        version = rest.pop(0)

    asset_path = "/".join(rest)
    if not asset_path:
        raise MissingAssetPathError()

    host = f"{hostname}:{port}" if port is not None else hostname

    logger.debug(
        f"Parsed delivery URL: cloud={cloud_name} resource={resource_type} "
        f"delivery={delivery_type} version={version}"
    )

    return ParsedDeliveryUrl(
        protocol=scheme,
        host=host,
        cloud_name=cloud_name,
        resource_type=resource_type,
        delivery_type=delivery_type.lower(),
        asset_path=asset_path,
        version=version,
    )


def canonicalize_path(asset_path: str, force_download: bool = False) -> str:
    """
    Produce the exact path the CDN edge will see after the signature segment.

    The fl_attachment flag has to be added BEFORE hashing: the edge verifies
    the token against the path it receives, flag included.

    Example:
        canonicalize_path("folder/photo.jpg", force_download=True)
        -> "fl_attachment/folder/photo.jpg"
    """
    path = asset_path.lstrip("/")
    if not force_download:
        return path

    # Re-signing a URL that already carries the flag must not stack it
    if path == ATTACHMENT_FLAG or path.startswith(f"{ATTACHMENT_FLAG}/"):
        return path
    return f"{ATTACHMENT_FLAG}/{path}"
