"""SQLAlchemy declarative base shared by the ORM models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for docversions ORM models."""
    pass
