"""Base Models and Mixins"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declared_attr

from schoolid.database import Base
from schoolid.models.enums import EntityKind


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def identifier_column(kind: EntityKind, length: int, **kwargs) -> Column:
    """
    Column holding a structured identifier of one kind.

    The kind is kept in ``Column.info`` so an identifier source can tell
    which grammar the stored values follow.
    """
    kwargs.setdefault("nullable", True)
    return Column(String(length), info={"entity_kind": kind}, **kwargs)


class BaseModel(Base):
    """
    Base model class for tenant tables.

    Provides:
    - UUID primary key
    - created_at / updated_at timestamps (UTC); created_at also orders
      student batches when picking the current academic year
    """
    __abstract__ = True

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class SchoolScopedMixin:
    """Rows owned by one school (tenant); deleted with it."""

    @declared_attr
    def school_id(cls):
        return Column(
            UUID(as_uuid=True),
            ForeignKey("schools.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )


class StatusMixin:
    """Active/inactive flag"""
    is_active = Column(Boolean, default=True, nullable=False, index=True)
