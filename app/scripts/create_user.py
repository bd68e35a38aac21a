"""
Create a user (e.g. the first admin; registration only ever creates USER accounts).
Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [ROLE] [--email EMAIL]
Example:
  python -m app.scripts.create_user admin s3cure-passw0rd ADMIN
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.core.security import USERNAME_MAX_LEN, hash_password, password_problems
from app.models.user import Role, User
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


def _role(value: str) -> Role:
    try:
        return Role.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user account.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help="Password (8-128 chars, at least one digit)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER,
        type=_role,
        help="ADMIN or USER (default USER)",
    )
    parser.add_argument("--email", default=None, help="Optional contact email")
    return parser


def create_user(
    session: Session,
    username: str,
    password: str,
    role: Role = Role.USER,
    email: str | None = None,
) -> User:
    """Validate and persist a new user. Raises ValueError when a rule fails or the name is taken."""
    username = username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        raise ValueError("Invalid username length.")
    problems = password_problems(password)
    if problems:
        raise ValueError(" ".join(problems))

    store = UserStore(session)
    if store.exists_by_username(username):
        raise ValueError(f"User '{username}' already exists.")
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role.value,
    )
    return store.save(user)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    db = SessionLocal()
    try:
        user = create_user(db, args.username, args.password, args.role, args.email)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Creating user failed: %s", e)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
