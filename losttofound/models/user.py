"""User model: one authenticated account."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from losttofound.models.base import TimestampMixin, new_uuid


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    is_active: bool = Field(default=True)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    is_active: bool
    created_at: datetime
