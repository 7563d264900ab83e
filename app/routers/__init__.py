# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - signed_url.py: Signed Cloudinary URL endpoint
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import signed_url

__all__ = [
    "health",
    "signed_url",
]
