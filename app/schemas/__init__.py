"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, TokenResponse
from app.schemas.errors import ErrorDetail, ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.users import (
    AdminUserUpdateRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
    UsersListResponse,
)

__all__ = [
    "AdminUserUpdateRequest",
    "CurrentUser",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "UsersListResponse",
]
