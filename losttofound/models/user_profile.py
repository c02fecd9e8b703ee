"""User profile model: subscription plan and billing link per account."""

import uuid
from enum import StrEnum

from sqlmodel import Column, Field, SQLModel

from losttofound.models.base import TimestampMixin, new_uuid, value_enum


class Plan(StrEnum):
    FREE = "free"
    PLUS = "plus"


class UserProfile(TimestampMixin, SQLModel, table=True):
    __tablename__ = "user_profiles"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    # One profile per account; the unique constraint backs mark-plus idempotence
    user_id: uuid.UUID = Field(foreign_key="users.id", unique=True, nullable=False, index=True)

    plan: Plan = Field(
        default=Plan.FREE,
        sa_column=Column(value_enum(Plan), nullable=False, server_default=Plan.FREE.value),
    )
    stripe_customer_id: str | None = Field(default=None, max_length=255)


# ── Pydantic schemas ─────────────────────────────────────────

class PlanFeatures(SQLModel):
    unlimited_pets: bool
    contact_fields: bool
    travel_mode: bool
    posters: bool


class UserProfileRead(SQLModel):
    user_id: uuid.UUID
    plan: Plan
    has_billing_account: bool
    features: PlanFeatures
