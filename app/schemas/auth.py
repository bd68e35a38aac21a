"""Schemas for the authenticated caller and issued tokens."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) for dependency injection and policy checks."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: Role


class TokenResponse(BaseModel):
    """JWT access token returned by POST /api/auth/token."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime = Field(..., description="UTC expiry of the token")
