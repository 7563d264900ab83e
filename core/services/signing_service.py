# =============================================================================
# core/services/signing_service.py - Signed URL Dispatcher
# =============================================================================
# Entry point of the signing core. Takes a delivery URL plus the caller's
# intent and runs the pipeline:
#
#   parse -> canonicalize -> sign -> build
#
# Two modes:
# - Delivery-Path (default): s--<token>-- in the CDN path, authenticated/private only
# - Download-API: signed call to the download endpoint, any delivery type,
#   always an attachment, optional custom filename
#
# The service holds only the immutable CloudinaryConfig. Every call reads the
# clock afresh; nothing is cached between requests. Any failure aborts the
# request with no partial output.
# =============================================================================

import logging
import time
from typing import Callable

from app.exceptions import (
    ConfigurationError,
    MissingAssetPathError,
    MissingUrlError,
    UnsupportedDeliveryTypeError,
)
from core.models import (
    DELIVERY_SIGNABLE_TYPES,
    DOWNLOAD_API_TYPES,
    CloudinaryConfig,
    DeliveryType,
    ParsedDeliveryUrl,
    SignedResult,
    SigningMode,
    SigningRequest,
)
from core.services.delivery_url import canonicalize_path, parse_delivery_url
from core.services.signatures import sign_params, sign_path
from core.services.url_builder import build_download_api_url, build_signed_delivery_url, extract_public_id

logger = logging.getLogger(__name__)


def _require_delivery_type(
    parsed: ParsedDeliveryUrl,
    allowed: frozenset[DeliveryType],
    mode: SigningMode,
) -> DeliveryType:
    allowed_values = sorted(t.value for t in allowed)
    if parsed.delivery_type not in allowed_values:
        raise UnsupportedDeliveryTypeError(
            delivery_type=parsed.delivery_type,
            allowed=allowed_values,
            mode=mode.value,
        )
    return DeliveryType(parsed.delivery_type)


class SigningService:
    """
    Produces authorized Cloudinary URLs for an already authenticated caller.

    Example:
        service = SigningService(settings.cloudinary_config())
        result = service.sign(
            "https://res.cloudinary.com/acme/video/private/v1/mixes/set.mp4",
            force_download=True,
        )
        result.url  # https://res.cloudinary.com/acme/video/private/s--xxxxxxxx--/fl_attachment/mixes/set.mp4
    """

    def __init__(
        self,
        config: CloudinaryConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._clock = clock

    @property
    def config(self) -> CloudinaryConfig:
        return self._config

    def sign(
        self,
        raw_url: str,
        force_download: bool = False,
        target_filename: str | None = None,
        use_download_api: bool = False,
    ) -> SignedResult:
        """
        Sign one delivery URL.

        Args:
            raw_url: Absolute Cloudinary delivery URL
            force_download: Delivery-Path mode only; adds fl_attachment
            target_filename: Download-API mode only; filename the browser saves as
            use_download_api: Use the central download endpoint instead of edge signing

        Returns:
            SignedResult with the final URL

        Raises:
            ConfigurationError: Cloud name, secret, or (Download-API) key not set
            SigningValidationError: Any parse or delivery-type failure
        """
        config = self._config
        if not config.api_secret:
            raise ConfigurationError("CLOUDINARY_API_SECRET")

        raw_url = (raw_url or "").strip()
        if not raw_url:
            raise MissingUrlError()

        if not config.cloud_name:
            raise ConfigurationError("CLOUDINARY_CLOUD_NAME")

        parsed = parse_delivery_url(raw_url, config.cloud_name, config.cdn_domain)

        if use_download_api:
            return self._sign_download_api(parsed, target_filename)
        return self._sign_delivery_path(parsed, force_download)

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def _sign_delivery_path(self, parsed: ParsedDeliveryUrl, force_download: bool) -> SignedResult:
        _require_delivery_type(parsed, DELIVERY_SIGNABLE_TYPES, SigningMode.DELIVERY)

        canonical_path = canonicalize_path(parsed.asset_path, force_download)
        token = sign_path(canonical_path, self._config.api_secret)
        url = build_signed_delivery_url(parsed, canonical_path, token)

        logger.info(
            f"Signed delivery URL: cloud={parsed.cloud_name} resource={parsed.resource_type} "
            f"delivery={parsed.delivery_type} download={force_download}"
        )
        return SignedResult(url=url, signature=token, mode=SigningMode.DELIVERY)

    def _sign_download_api(self, parsed: ParsedDeliveryUrl, target_filename: str | None) -> SignedResult:
        config = self._config
        if not config.api_key:
            raise ConfigurationError("CLOUDINARY_API_KEY")

        delivery_type = _require_delivery_type(parsed, DOWNLOAD_API_TYPES, SigningMode.DOWNLOAD_API)

        # The parser already split off the version; put it back so only one is stripped
        full_path = "/".join(filter(None, [parsed.version, parsed.asset_path]))
        public_id = extract_public_id(full_path)
        if not public_id:
            raise MissingAssetPathError()

        request = SigningRequest(
            cloud_name=parsed.cloud_name,
            resource_type=parsed.resource_type,
            public_id=public_id,
            delivery_type=delivery_type,
            api_key=config.api_key,
            api_secret=config.api_secret,
            timestamp=int(self._clock()),
            attachment=True,
            target_filename=(target_filename or "").strip() or None,
        )
        signature = sign_params(request)
        url = build_download_api_url(request, signature, config.download_api_base_url)

        logger.info(
            f"Signed download API URL: cloud={parsed.cloud_name} resource={parsed.resource_type} "
            f"delivery={parsed.delivery_type} custom_filename={request.target_filename is not None}"
        )
        return SignedResult(url=url, signature=signature, mode=SigningMode.DOWNLOAD_API)
