"""Declarative base for SQLAlchemy models."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "pk": "pk_%(table_name)s",
}


class BaseSchema(DeclarativeBase):
    """Base class for the game session and performance schemas.

    Constraint names follow :data:`NAMING_CONVENTION` so Alembic
    autogeneration matches the hand-written migrations.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
