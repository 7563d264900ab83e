# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Media Signer API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    MediaSignerException,
    http_exception_handler,
    media_signer_exception_handler,
    validation_exception_handler,
)
from app.routers import health, signed_url

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs which pieces of configuration are present at startup so a missing
    secret shows up in the logs before the first request fails.
    """
    config = settings.cloudinary_config()

    logger.info(f"Starting Media Signer API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not config.cloud_name:
        logger.warning("CLOUDINARY_CLOUD_NAME is not set; signing requests will fail")
    if not config.api_secret:
        logger.warning("CLOUDINARY_API_SECRET is not set; signing requests will fail")
    if not config.api_key:
        logger.info("CLOUDINARY_API_KEY is not set; Download-API mode is disabled")
    if not settings.supabase_configured:
        logger.warning("Supabase is not configured; every signing request will be refused")

    yield

    logger.info("Shutting down Media Signer API")


# Create FastAPI application
app = FastAPI(
    title="Media Signer API",
    description="""
## Signed Cloudinary URLs for the label site

Turns a Cloudinary delivery URL for a private or authenticated asset into a
short-lived authorized URL for a signed-in user.

### Modes

| Mode | Query | Result |
|------|-------|--------|
| **Delivery** | `download=1` optional | CDN URL with an `s--<token>--` segment |
| **Download API** | `download_api=1`, `filename=...` optional | Signed call to the Cloudinary download endpoint |

### Quick Start

```bash
curl -H "Authorization: Bearer $TOKEN" \\
  "http://localhost:8000/api/cloudinary-signed-url?url=https://res.cloudinary.com/acme/video/private/v1/mixes/set.mp4&download=1"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Signing",
            "description": "Signed delivery and Download-API URLs",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MediaSignerException)
async def handle_media_signer_exception(request: Request, exc: MediaSignerException):
    """Handle custom Media Signer exceptions."""
    return await media_signer_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle malformed query parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """Handle 404/405 and other framework errors."""
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.url.path}: {type(exc).__name__}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Signed URL endpoint (path kept stable for the existing frontend)
app.include_router(
    signed_url.router,
    prefix="/api",
    tags=["Signing"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Media Signer API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
