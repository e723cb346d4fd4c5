# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for admin sign-in and the authenticated operator.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated operator extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the backend.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class LoginRequest(BaseModel):
    """Admin credentials from the login form."""
    email: str = Field(..., min_length=3, examples=["admin@college.edu"])
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Session handed back after a successful sign-in."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    message: str = "Login successful"
