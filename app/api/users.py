"""User endpoints: registration, self-service profile, and admin management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.auth import require_admin, require_identity
from app.core.database import get_db
from app.core.errors import NotFound, ValidationFailed
from app.core.security import hash_password
from app.models import Role, User
from app.schemas.auth import CurrentUser
from app.schemas.errors import ErrorDetail
from app.schemas.users import (
    AdminUserUpdateRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
    UsersListResponse,
)
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def _username_taken() -> ValidationFailed:
    return ValidationFailed(
        "Validation failed",
        errors=[ErrorDetail(field="username", message="Username is already taken")],
    )


def _save(store: UserStore, user: User) -> User:
    """Save, turning a unique-constraint race on username into a validation error."""
    try:
        return store.save(user)
    except IntegrityError as e:
        raise _username_taken() from e


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    body: RegisterRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Create a USER account. Open to anyone."""
    if store.exists_by_username(body.username):
        raise _username_taken()

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role.USER.value,
    )
    _save(store, user)
    logger.info("Registered user: username=%s id=%s", user.username, user.id)
    return MessageResponse(message="User registered successfully")


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[CurrentUser, Depends(require_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserResponse:
    """Return the caller's own account."""
    user = store.find_by_username(current_user.username)
    if user is None:
        raise NotFound("User not found")
    return UserResponse.model_validate(user)


@router.put("/me", response_model=MessageResponse)
def update_me(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(require_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Update the caller's email and password."""
    user = store.find_by_username(current_user.username)
    if user is None:
        raise NotFound("User not found")

    user.email = body.email
    user.password_hash = hash_password(body.password)
    store.save(user)
    logger.info("User updated own details: username=%s", user.username)
    return MessageResponse(message="User details updated successfully")


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    users = store.find_all()
    return UsersListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Delete a user by id (admin only)."""
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")

    username = user.username
    store.delete_by_id(user_id)
    logger.info(
        "Deleted user: id=%s username=%s by=%s role=%s",
        user_id,
        username,
        current_user.username,
        current_user.role.value,
    )
    return MessageResponse(message="User deleted successfully")


@router.put("/updateUser/{user_id}", response_model=MessageResponse)
def update_user_by_admin(
    user_id: int,
    body: AdminUserUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Replace username, email, password and role of any user (admin only)."""
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    if body.username != user.username and store.exists_by_username(body.username):
        raise _username_taken()

    user.username = body.username
    user.email = body.email
    user.password_hash = hash_password(body.password)
    user.role = body.role.value
    _save(store, user)
    logger.info(
        "Admin updated user: id=%s username=%s role=%s by=%s",
        user_id,
        user.username,
        user.role,
        current_user.username,
    )
    return MessageResponse(message="User updated successfully by Admin")
