"""Shared base fields for all models."""

import enum
import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def value_enum(enum_cls: type[enum.Enum], length: int = 10) -> sa.Enum:
    """VARCHAR-backed enum type that persists member values ("home"), not names ("HOME")."""
    return sa.Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=length,
    )


class TimestampMixin(SQLModel):
    """Created / updated timestamps injected into mutable tables."""

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()


def blank_to_none(value: str | None) -> str | None:
    """Trim a free-text value; empty input is stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None
