"""Auth session model: one row per sign-in, revoked on sign-out."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from losttofound.models.base import TimestampMixin, new_uuid


class AuthSession(TimestampMixin, SQLModel, table=True):
    __tablename__ = "auth_sessions"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    is_active: bool = Field(default=True)
    expires_at: datetime = Field(nullable=False)
    last_used_at: datetime | None = Field(default=None)
