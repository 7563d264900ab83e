# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated caller, as resolved by Supabase from the bearer token.

    The signer only needs to know that this exists; it never inspects it.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
