"""Pet model: one public profile per animal, owned by a single account."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from losttofound.models.base import TimestampMixin, new_uuid, value_enum

MAX_PHOTOS = 3


class PetStatus(StrEnum):
    HOME = "home"
    LOST = "lost"
    FOUND = "found"


class Pet(TimestampMixin, SQLModel, table=True):
    __tablename__ = "pets"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    owner_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    slug: str = Field(max_length=120, unique=True, nullable=False, index=True)

    status: PetStatus = Field(
        default=PetStatus.HOME,
        sa_column=Column(
            value_enum(PetStatus), nullable=False, index=True, server_default=PetStatus.HOME.value,
        ),
    )

    name: str = Field(max_length=100, nullable=False)
    description: str | None = Field(default=None, sa_column=Column(Text))
    behavior_notes: str | None = Field(default=None, sa_column=Column(Text))

    # Photo slots 1..3 (public URLs in object storage)
    photo_url: str | None = Field(default=None, max_length=2048)
    photo_url_2: str | None = Field(default=None, max_length=2048)
    photo_url_3: str | None = Field(default=None, max_length=2048)

    # Owner-only contact details, never rendered on public pages
    contact_email_primary: str | None = Field(default=None, max_length=320)
    contact_email_backup: str | None = Field(default=None, max_length=320)
    contact_phone_primary: str | None = Field(default=None, max_length=50)
    contact_phone_backup: str | None = Field(default=None, max_length=50)

    # Travel mode; the other travel fields are advisory and only read when the flag is on
    is_travel_mode: bool = Field(default=False)
    travel_city: str | None = Field(default=None, max_length=255)
    travel_region: str | None = Field(default=None, max_length=255)
    travel_radius_km: float | None = Field(default=None, ge=0)
    travel_notes: str | None = Field(default=None, sa_column=Column(Text))


def photo_field(slot: int) -> str:
    """Column name for photo slot 1..3."""
    if slot < 1 or slot > MAX_PHOTOS:
        raise ValueError(f"photo slot must be between 1 and {MAX_PHOTOS}")
    return "photo_url" if slot == 1 else f"photo_url_{slot}"


# ── Pydantic schemas (owner side) ────────────────────────────

class PetCreate(SQLModel):
    name: str = Field(max_length=100)
    description: str | None = None
    behavior_notes: str | None = None


class PetUpdate(SQLModel):
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    behavior_notes: str | None = None


class PetContactUpdate(SQLModel):
    contact_email_primary: str | None = Field(default=None, max_length=320)
    contact_email_backup: str | None = Field(default=None, max_length=320)
    contact_phone_primary: str | None = Field(default=None, max_length=50)
    contact_phone_backup: str | None = Field(default=None, max_length=50)


class PetTravelUpdate(SQLModel):
    is_travel_mode: bool = False
    travel_city: str | None = Field(default=None, max_length=255)
    travel_region: str | None = Field(default=None, max_length=255)
    travel_radius_km: float | None = Field(default=None, ge=0)
    travel_notes: str | None = None


class PetRead(SQLModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    slug: str
    status: PetStatus
    name: str
    description: str | None
    behavior_notes: str | None
    photo_url: str | None
    photo_url_2: str | None
    photo_url_3: str | None
    contact_email_primary: str | None
    contact_email_backup: str | None
    contact_phone_primary: str | None
    contact_phone_backup: str | None
    is_travel_mode: bool
    travel_city: str | None
    travel_region: str | None
    travel_radius_km: float | None
    travel_notes: str | None
    created_at: datetime
    updated_at: datetime


# ── Public views (no contact fields) ─────────────────────────

class TravelInfo(SQLModel):
    location_label: str | None
    radius_km: float | None
    notes: str | None


class PetPublicRead(SQLModel):
    id: uuid.UUID
    slug: str
    name: str
    status: PetStatus
    description: str | None
    behavior_notes: str | None
    photos: list[str]
    travel: TravelInfo | None = None


class LostBoardCard(SQLModel):
    slug: str
    name: str
    photos: list[str]
    travel_location_label: str | None = None
    is_travel_mode: bool
    updated_at: datetime


class PosterRead(SQLModel):
    slug: str
    name: str
    primary_photo: str | None
    owner_phone: str | None
    phone_hint: str | None = None
