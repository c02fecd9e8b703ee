"""View derivation for dashboards, public pet pages, the lost board and posters.

Everything here is a pure function of already-loaded rows.
"""

from __future__ import annotations

from pydantic import BaseModel

from losttofound.models.finder_message import FinderMessage, FinderMessageRead
from losttofound.models.pet import (
    LostBoardCard,
    Pet,
    PetPublicRead,
    PetRead,
    PetStatus,
    PosterRead,
    TravelInfo,
)
from losttofound.models.user_profile import Plan, PlanFeatures
from losttofound.services.entitlements import plan_features

POSTER_PHONE_HINT = "Write a phone number here before posting this flyer."


def pet_photos(pet: Pet) -> list[str]:
    """Non-empty photo URLs in slot order."""
    return [url for url in (pet.photo_url, pet.photo_url_2, pet.photo_url_3) if url]


def travel_location_label(pet: Pet) -> str | None:
    parts = [p.strip() for p in (pet.travel_city, pet.travel_region) if p and p.strip()]
    return ", ".join(parts) if parts else None


def _travel_info(pet: Pet) -> TravelInfo | None:
    if not pet.is_travel_mode:
        return None
    radius = pet.travel_radius_km
    return TravelInfo(
        location_label=travel_location_label(pet),
        radius_km=radius if radius is not None and radius > 0 else None,
        notes=pet.travel_notes or None,
    )


def public_pet_view(pet: Pet) -> PetPublicRead:
    return PetPublicRead(
        id=pet.id,
        slug=pet.slug,
        name=pet.name,
        status=pet.status,
        description=pet.description,
        behavior_notes=pet.behavior_notes,
        photos=pet_photos(pet),
        travel=_travel_info(pet),
    )


def lost_board_card(pet: Pet) -> LostBoardCard:
    return LostBoardCard(
        slug=pet.slug,
        name=pet.name,
        photos=pet_photos(pet),
        is_travel_mode=pet.is_travel_mode,
        travel_location_label=travel_location_label(pet) if pet.is_travel_mode else None,
        updated_at=pet.updated_at,
    )


def poster_view(pet: Pet) -> PosterRead:
    photos = pet_photos(pet)
    phone = (
        (pet.contact_phone_primary or "").strip()
        or (pet.contact_phone_backup or "").strip()
        or None
    )
    return PosterRead(
        slug=pet.slug,
        name=pet.name,
        primary_photo=photos[0] if photos else None,
        owner_phone=phone,
        phone_hint=None if phone else POSTER_PHONE_HINT,
    )


# ── Owner dashboard ──────────────────────────────────────────

class DashboardCounts(BaseModel):
    total_pets: int
    lost_pets: int
    travel_mode_pets: int


class DashboardView(BaseModel):
    plan: Plan
    features: PlanFeatures
    pets: list[PetRead]
    finder_messages: list[FinderMessageRead]
    counts: DashboardCounts


def dashboard_view(plan: Plan, pets: list[Pet], messages: list[FinderMessage]) -> DashboardView:
    return DashboardView(
        plan=plan,
        features=plan_features(plan),
        pets=[PetRead.model_validate(p) for p in pets],
        finder_messages=[FinderMessageRead.model_validate(m) for m in messages],
        counts=DashboardCounts(
            total_pets=len(pets),
            lost_pets=sum(1 for p in pets if p.status == PetStatus.LOST),
            travel_mode_pets=sum(1 for p in pets if p.is_travel_mode),
        ),
    )
