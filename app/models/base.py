"""SQLAlchemy declarative Base shared by every table in the service."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; alembic autogenerate reads Base.metadata."""
