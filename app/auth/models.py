# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from typing import Any, Optional


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the identity provider.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(BaseModel):
    """User profile returned by the auth endpoints."""
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_auth_user(cls, user: AuthUser) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name, avatar_url=user.avatar_url)

    @classmethod
    def from_provider_user(cls, user: Any) -> "UserResponse":
        """Build from the user object returned by Supabase Auth."""
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            id=user.id,
            email=getattr(user, "email", None),
            name=metadata.get("name"),
            created_at=getattr(user, "created_at", None),
            avatar_url=metadata.get("avatar_url"),
        )


class AuthSession(BaseModel):
    """
    Tokens issued on login/signup.

    The client keeps these and sends the access token as a Bearer header;
    the server holds no session state.
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None
    user: UserResponse


class LoginRequest(BaseModel):
    """Login credentials."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Signup credentials."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
