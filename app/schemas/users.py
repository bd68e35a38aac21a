"""Request/response schemas for the /api/users endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    password_problems,
)
from app.models.user import Role


def _validate_username(value: str) -> str:
    """Trim and length-check a username."""
    username = value.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise ValueError(
            f"username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters"
        )
    return username


def _validate_password(value: str) -> str:
    problems = password_problems(value)
    if problems:
        raise ValueError(" ".join(problems))
    return value


class RegisterRequest(BaseModel):
    """New account. Registration always creates a USER; roles are granted by an admin."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., description="Unique login name")
    email: EmailStr | None = Field(default=None, description="Contact email")
    password: str = Field(
        ...,
        description=f"{PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters, at least one digit",
    )

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return _validate_username(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)


class ProfileUpdateRequest(BaseModel):
    """Self-service update of the caller's own account (email and password)."""

    model_config = ConfigDict(extra="ignore")

    email: EmailStr | None = None
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)


class AdminUserUpdateRequest(BaseModel):
    """Admin update of any account: username, email, password and role."""

    model_config = ConfigDict(extra="ignore")

    username: str
    email: EmailStr | None = None
    password: str
    role: Role = Field(..., description="ADMIN or USER (ROLE_ prefix and case are tolerated)")

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return _validate_username(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password(v)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: object) -> Role:
        if not isinstance(v, str):
            raise ValueError("role must be a string")
        return Role.parse(v)


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    role: Role


class UsersListResponse(BaseModel):
    """Response for GET /api/users (admin only)."""

    users: list[UserResponse]


class MessageResponse(BaseModel):
    """Plain confirmation for write operations."""

    message: str
