"""Identity resolution, access policy enforcement, and JWT issue."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.orm import Session

from app.core.access_policy import USER_MANAGEMENT_POLICY, Verdict
from app.core.database import get_db
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import create_access_token, decode_access_token, verify_password
from app.models import Role, User
from app.schemas.auth import CurrentUser, TokenResponse
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)
router = APIRouter()

basic_scheme = HTTPBasic(auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


def _to_current_user(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, username=user.username, role=user.role_enum)


def _identity_from_basic(store: UserStore, credentials: HTTPBasicCredentials) -> CurrentUser | None:
    user = store.find_by_username(credentials.username)
    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.info("Basic authentication failed: username=%s", credentials.username)
        return None
    return _to_current_user(user)


def _identity_from_bearer(store: UserStore, token: str) -> CurrentUser | None:
    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        logger.info("Bearer authentication failed: invalid or expired token")
        return None
    user = store.find_by_id(user_id)
    if user is None:
        logger.info("Bearer authentication failed: user_id=%s no longer exists", user_id)
        return None
    return _to_current_user(user)


def resolve_identity(
    basic: Annotated[HTTPBasicCredentials | None, Depends(basic_scheme)],
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """
    Dependency: the caller's identity from Basic credentials or a Bearer JWT, else None.

    Bad credentials resolve to an anonymous caller rather than an error; the access
    policy decides whether the route tolerates that.
    """
    store = UserStore(db)
    if basic is not None:
        return _identity_from_basic(store, basic)
    if bearer is not None:
        return _identity_from_bearer(store, bearer.credentials)
    return None


def application_path(request: Request) -> str:
    """
    The request path relative to the mount point.

    Behind a proxy (uvicorn --root-path) the URL path carries the root_path prefix,
    while policy rules are written against the routes as the app declares them.
    """
    path = request.url.path
    root_path = request.scope.get("root_path", "")
    if not root_path or not path.startswith(root_path):
        return path
    if path == root_path:
        return "/"
    if path[len(root_path)] == "/":
        return path[len(root_path):]
    return path


def enforce_access_policy(
    request: Request,
    identity: Annotated[CurrentUser | None, Depends(resolve_identity)],
) -> None:
    """Application-wide dependency: evaluate the access policy and raise on deny verdicts."""
    method = request.method
    path = application_path(request)
    if logger.isEnabledFor(logging.DEBUG):
        rule = USER_MANAGEMENT_POLICY.match(method, path)
        logger.debug(
            "Access policy: method=%s path=%s rule=%s",
            method,
            path,
            rule.pattern if rule else "<fallback>",
        )

    verdict = USER_MANAGEMENT_POLICY.evaluate(method, path, identity)
    if verdict is Verdict.ALLOW:
        return
    username = identity.username if identity else None
    logger.info(
        "Access denied: verdict=%s method=%s path=%s username=%s",
        verdict.value,
        method,
        path,
        username,
    )
    if verdict is Verdict.DENY_FORBIDDEN:
        raise Forbidden()
    raise Unauthenticated()


def require_identity(
    identity: Annotated[CurrentUser | None, Depends(resolve_identity)],
) -> CurrentUser:
    """Dependency: the authenticated caller. Raises 401 if there is none."""
    if identity is None:
        raise Unauthenticated()
    return identity


def require_admin(
    current_user: Annotated[CurrentUser, Depends(require_identity)],
) -> CurrentUser:
    """Dependency: require an authenticated ADMIN. Raises 403 for any other role."""
    if current_user.role != Role.ADMIN:
        raise Forbidden("Admin access required")
    return current_user


@router.post("/token", response_model=TokenResponse)
def issue_token(
    current_user: Annotated[CurrentUser, Depends(require_identity)],
) -> TokenResponse:
    """
    Exchange the caller's credentials for a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    token, expires_at = create_access_token(sub=current_user.id, role=current_user.role.value)
    logger.info("Issued access token: username=%s", current_user.username)
    return TokenResponse(access_token=token, token_type="bearer", expires_at=expires_at)
