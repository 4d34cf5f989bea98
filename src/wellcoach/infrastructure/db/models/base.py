# src/wellcoach/infrastructure/db/models/base.py
import uuid

from sqlalchemy import JSON, Enum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from wellcoach.domain.entities import Module

# JSONB on PostgreSQL, plain JSON elsewhere.
JSONType = JSON().with_variant(JSONB(), "postgresql")


def enum_values(enum_cls):
    """Persist enum values ("past_due"), not member names ("PAST_DUE")."""
    return [member.value for member in enum_cls]


# Shared by every table that stores a module, so PostgreSQL sees one type.
ModuleEnum = Enum(Module, name="coachingmodule", values_callable=enum_values)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """The base class for all SQLAlchemy ORM models."""
    pass
