# =============================================================================
# core/services/signatures.py - Signature Engine
# =============================================================================
# The two Cloudinary signing algorithms. Both must match the provider
# byte-for-byte; a divergence is invisible locally and only shows up as the
# CDN refusing the URL, so tests pin fixed vectors for each.
#
# - sign_path: Delivery-Path signing, token goes into an s--<token>-- segment
# - sign_params: Download-API signing, hex digest goes into ?signature=
#
# Pure functions: no clock, no settings, no logging of inputs.
# =============================================================================

import base64
import hashlib

from core.models import SigningRequest

# Length of the token embedded in signed delivery URLs
DELIVERY_TOKEN_LENGTH = 8

# Never part of the string to sign, even if a caller passes them in
EXCLUDED_SIGNATURE_PARAMS = frozenset({"api_key", "api_secret", "file", "signature", "resource_type", "cloud_name"})


def _base64url(digest: bytes) -> str:
    """Base64 with -/_ instead of +// and no padding."""
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def sign_path(path: str, secret: str) -> str:
    """
    Compute the Delivery-Path token for a canonical asset path.

    token = base64url(sha1(path + secret))[:8]

    Args:
        path: Canonical path exactly as it follows the signature segment,
              e.g. "fl_attachment/folder/photo.jpg"
        secret: API secret

    Returns:
        8-character token to embed as s--<token>--
    """
    digest = hashlib.sha1(f"{path}{secret}".encode("utf-8")).digest()
    return _base64url(digest)[:DELIVERY_TOKEN_LENGTH]


def params_to_sign(request: SigningRequest) -> dict[str, str]:
    """
    Build the canonical parameter set for a Download-API signature.

    Only public_id, timestamp, type, and (when present) attachment and
    target_filename are signed. api_key travels in the query string but is
    NOT signed; including it produces a signature the API rejects.
    """
    params = {
        "public_id": request.public_id,
        "timestamp": str(request.timestamp),
        "type": request.delivery_type.value,
    }
    if request.attachment:
        params["attachment"] = "true"
    if request.target_filename:
        params["target_filename"] = request.target_filename
    return params


def string_to_sign(params: dict[str, str]) -> str:
    """
    Serialize parameters as sorted key=value pairs joined by '&'.

    Excluded keys are dropped here as well, so a misbuilt dict cannot leak
    the key or secret into the hashed payload.

    Example:
        {"type": "private", "public_id": "a/b", "timestamp": "1"}
        -> "public_id=a/b&timestamp=1&type=private"
    """
    return "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in EXCLUDED_SIGNATURE_PARAMS and params[key] not in (None, "")
    )


def sign_params(request: SigningRequest) -> str:
    """
    Compute the Download-API signature.

    signature = hex(sha1(string_to_sign(params) + api_secret))

    Args:
        request: Fully populated signing request (timestamp already taken)

    Returns:
        40-character lowercase hex digest
    """
    payload = string_to_sign(params_to_sign(request)) + request.api_secret
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
