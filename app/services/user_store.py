"""Persistence for user accounts: lookups, listing, save and delete over a SQLAlchemy session."""

import logging

from sqlalchemy.orm import Session

from app.models import User

logger = logging.getLogger(__name__)


class UserStore:
    """Thin repository over the users table. One instance per request session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_all(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def save(self, user: User) -> User:
        """Insert or update the user, commit, and return it refreshed from the database."""
        self.session.add(user)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def delete_by_id(self, user_id: int) -> None:
        """Delete the user with this id. Idempotent: missing ids are a no-op."""
        deleted = (
            self.session.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        logger.debug("delete_by_id: user_id=%s rows=%s", user_id, deleted)
