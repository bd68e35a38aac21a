"""ORM model for user accounts and the role enum used by access control."""

from enum import Enum

from sqlalchemy import Column, Integer, String

from app.models.base import Base

# Prefix some auth frameworks put in front of role names ("ROLE_ADMIN").
ROLE_PREFIX = "ROLE_"


class Role(str, Enum):
    """
    The single role carried by a user.

    Stored and compared by bare upper-case name; ROLE_PREFIX is never persisted.
    """

    ADMIN = "ADMIN"
    USER = "USER"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Normalise 'admin', 'ROLE_ADMIN', ' Admin ' and friends to a Role member."""
        if isinstance(value, Role):
            return value
        name = str(value).strip().upper()
        if name.startswith(ROLE_PREFIX):
            name = name[len(ROLE_PREFIX):]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"role must be one of {[r.value for r in cls]}, got {value!r}"
            ) from None


class User(Base):
    """
    User account for authentication and role-based access control.

    role: 'ADMIN' or 'USER' (see Role)
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)

    @property
    def role_enum(self) -> Role:
        return Role.parse(self.role)
