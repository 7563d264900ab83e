# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for signing requests and results
# - services/: URL parsing, signature algorithms, URL building, dispatch
#
# Code in this package should NOT import from FastAPI routers or Supabase.
# This keeps the signing pipeline testable without an HTTP context.
# =============================================================================
