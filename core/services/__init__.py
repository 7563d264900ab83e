# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .delivery_url import canonicalize_path, parse_delivery_url
from .signatures import params_to_sign, sign_params, sign_path, string_to_sign
from .signing_service import SigningService
from .url_builder import build_download_api_url, build_signed_delivery_url, extract_public_id

__all__ = [
    "SigningService",
    "parse_delivery_url",
    "canonicalize_path",
    "sign_path",
    "sign_params",
    "params_to_sign",
    "string_to_sign",
    "build_signed_delivery_url",
    "build_download_api_url",
    "extract_public_id",
]
