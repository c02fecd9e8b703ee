"""Finder message model: an append-only sighting report on a pet."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from losttofound.models.base import new_uuid, utcnow, value_enum


class ReportKind(StrEnum):
    HAVE = "have"  # finder has the pet with them
    SAW = "saw"  # finder saw the pet


class FinderMessage(SQLModel, table=True):
    __tablename__ = "finder_messages"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    pet_id: uuid.UUID = Field(foreign_key="pets.id", nullable=False, index=True)

    report_type: ReportKind = Field(sa_column=Column(value_enum(ReportKind), nullable=False))
    message: str = Field(sa_column=Column(Text, nullable=False))
    general_location: str | None = Field(default=None, max_length=500)

    # No updated_at: rows are never modified after insert
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)


# ── Pydantic schemas ─────────────────────────────────────────

class FinderMessageRead(SQLModel):
    id: uuid.UUID
    pet_id: uuid.UUID
    report_type: ReportKind
    message: str
    general_location: str | None
    created_at: datetime
