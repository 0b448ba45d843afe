"""
SQLAlchemy declarative base.

All models inherit from this Base class so the metadata can be created
in one place (startup schema creation, Alembic autogenerate).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
