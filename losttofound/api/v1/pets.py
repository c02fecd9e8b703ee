"""Pet CRUD for owners: all queries scoped to the authenticated account."""

import time
import uuid

from fastapi import APIRouter, HTTPException, UploadFile, status
from pydantic import BaseModel, model_validator
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.api.deps import Auth, Session, Storage
from losttofound.core.errors import PetNotFoundError, ValidationError
from losttofound.models.base import blank_to_none
from losttofound.models.finder_message import FinderMessageRead
from losttofound.models.pet import (
    MAX_PHOTOS,
    Pet,
    PetContactUpdate,
    PetCreate,
    PetRead,
    PetStatus,
    PetTravelUpdate,
    PetUpdate,
    PosterRead,
    photo_field,
)
from losttofound.services.entitlements import (
    can_create_pet,
    can_edit_contact_fields,
    can_edit_travel_mode,
    can_generate_poster,
)
from losttofound.services.finder_reports import list_reports
from losttofound.services.pet_status import (
    INITIAL_STATUS,
    StatusCommand,
    change_pet_status,
    command_for,
)
from losttofound.services.presentation import poster_view
from losttofound.services.slugs import generate_unique_slug
from losttofound.services.storage import ALLOWED_PHOTO_EXTENSIONS, PhotoStorage, photo_path
from losttofound.services.subscriptions import get_or_create_profile

router = APIRouter(prefix="/pets", tags=["pets"])


class StatusChangeRequest(BaseModel):
    """Either an explicit command or the target status."""
    command: StatusCommand | None = None
    status: PetStatus | None = None

    @model_validator(mode="after")
    def _one_of(self) -> "StatusChangeRequest":
        if (self.command is None) == (self.status is None):
            raise ValueError("provide exactly one of 'command' or 'status'")
        return self

    def resolved(self) -> StatusCommand:
        return self.command if self.command is not None else command_for(self.status)


# ── Routes ────────────────────────────────────────────────────

@router.post("", response_model=PetRead, status_code=status.HTTP_201_CREATED)
async def create_pet(body: PetCreate, auth: Auth, session: Session) -> PetRead:
    name = body.name.strip()
    if not name:
        raise ValidationError("Pet name is required.")

    profile = await get_or_create_profile(session, auth.user_id)
    count = await session.scalar(
        select(func.count()).select_from(Pet).where(Pet.owner_id == auth.user_id)
    )
    can_create_pet(profile.plan, count or 0).require()

    pet = Pet(
        owner_id=auth.user_id,
        name=name,
        slug=await generate_unique_slug(session, name),
        status=INITIAL_STATUS,
        description=blank_to_none(body.description),
        behavior_notes=blank_to_none(body.behavior_notes),
    )
    session.add(pet)
    await session.commit()
    await session.refresh(pet)
    return PetRead.model_validate(pet)


@router.get("", response_model=list[PetRead])
async def list_pets(auth: Auth, session: Session) -> list[PetRead]:
    stmt = (
        select(Pet)
        .where(Pet.owner_id == auth.user_id)
        .order_by(Pet.created_at.asc())  # type: ignore[attr-defined]
    )
    result = await session.execute(stmt)
    return [PetRead.model_validate(p) for p in result.scalars().all()]


@router.get("/{pet_id}", response_model=PetRead)
async def get_pet(pet_id: uuid.UUID, auth: Auth, session: Session) -> PetRead:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    return PetRead.model_validate(pet)


@router.patch("/{pet_id}", response_model=PetRead)
async def update_pet(
    pet_id: uuid.UUID,
    body: PetUpdate,
    auth: Auth,
    session: Session,
) -> PetRead:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    update_data = body.model_dump(exclude_unset=True)

    if "name" in update_data:
        name = (update_data.pop("name") or "").strip()
        if not name:
            raise ValidationError("Pet name is required.")
        pet.name = name

    for field, value in update_data.items():
        setattr(pet, field, blank_to_none(value))

    return await _save(pet, session)


@router.post("/{pet_id}/status", response_model=PetRead)
async def change_status(
    pet_id: uuid.UUID,
    body: StatusChangeRequest,
    auth: Auth,
    session: Session,
) -> PetRead:
    """Apply a status command; the response is the committed state."""
    try:
        pet = await change_pet_status(session, auth.user_id, pet_id, body.resolved())
    except PetNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return PetRead.model_validate(pet)


@router.put("/{pet_id}/contact", response_model=PetRead)
async def update_contact(
    pet_id: uuid.UUID,
    body: PetContactUpdate,
    auth: Auth,
    session: Session,
) -> PetRead:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    profile = await get_or_create_profile(session, auth.user_id)
    can_edit_contact_fields(profile.plan).require()

    pet.contact_email_primary = blank_to_none(body.contact_email_primary)
    pet.contact_email_backup = blank_to_none(body.contact_email_backup)
    pet.contact_phone_primary = blank_to_none(body.contact_phone_primary)
    pet.contact_phone_backup = blank_to_none(body.contact_phone_backup)
    return await _save(pet, session)


@router.put("/{pet_id}/travel", response_model=PetRead)
async def update_travel(
    pet_id: uuid.UUID,
    body: PetTravelUpdate,
    auth: Auth,
    session: Session,
) -> PetRead:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    profile = await get_or_create_profile(session, auth.user_id)
    can_edit_travel_mode(profile.plan).require()

    pet.is_travel_mode = body.is_travel_mode
    pet.travel_city = blank_to_none(body.travel_city)
    pet.travel_region = blank_to_none(body.travel_region)
    pet.travel_radius_km = body.travel_radius_km
    pet.travel_notes = blank_to_none(body.travel_notes)
    return await _save(pet, session)


@router.post("/{pet_id}/photos", response_model=PetRead)
async def upload_photos(
    pet_id: uuid.UUID,
    files: list[UploadFile],
    auth: Auth,
    session: Session,
    storage: Storage,
) -> PetRead:
    """Store up to three photos, filling slots 1..n in upload order."""
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)

    to_upload = files[:MAX_PHOTOS]
    if not to_upload:
        raise ValidationError("No photos were provided.")

    payloads: list[tuple[str, bytes]] = []
    for file in to_upload:
        filename = file.filename or ""
        ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_PHOTO_EXTENSIONS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail=f"Unsupported file type: {ext or filename}. "
                f"Allowed: {', '.join(sorted(ALLOWED_PHOTO_EXTENSIONS))}",
            )
        content = await file.read()
        if len(content) > storage.settings.max_photo_size:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail=f"File too large. Maximum size is "
                f"{storage.settings.max_photo_size // (1024 * 1024)} MB.",
            )
        payloads.append((filename, content))

    stamp = int(time.time() * 1000)
    for index, (filename, content) in enumerate(payloads):
        field = photo_field(index + 1)
        previous = getattr(pet, field)
        path = photo_path(str(auth.user_id), str(pet.id), stamp, index, filename)
        url = storage.upload(path, content, upsert=True)
        setattr(pet, field, url)
        if previous and previous != url:
            _discard_photo(storage, previous)

    return await _save(pet, session)


@router.delete("/{pet_id}/photos/{slot}", response_model=PetRead)
async def delete_photo(
    pet_id: uuid.UUID,
    slot: int,
    auth: Auth,
    session: Session,
    storage: Storage,
) -> PetRead:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    try:
        field = photo_field(slot)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    url = getattr(pet, field)
    if url:
        _discard_photo(storage, url)
    setattr(pet, field, None)
    return await _save(pet, session)


@router.get("/{pet_id}/finder-messages", response_model=list[FinderMessageRead])
async def list_finder_messages(
    pet_id: uuid.UUID,
    auth: Auth,
    session: Session,
) -> list[FinderMessageRead]:
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    messages = await list_reports(session, [pet.id])
    return [FinderMessageRead.model_validate(m) for m in messages]


@router.get("/{pet_id}/poster", response_model=PosterRead)
async def get_poster(pet_id: uuid.UUID, auth: Auth, session: Session) -> PosterRead:
    """Printable lost-pet poster, including the owner's phone number."""
    pet = await _get_owned_or_404(pet_id, auth.user_id, session)
    profile = await get_or_create_profile(session, auth.user_id)
    can_generate_poster(profile.plan).require()
    return poster_view(pet)


# ── Internal helpers ──────────────────────────────────────────

async def _get_owned_or_404(pet_id: uuid.UUID, owner_id: uuid.UUID, session: AsyncSession) -> Pet:
    stmt = select(Pet).where(Pet.id == pet_id, Pet.owner_id == owner_id)
    result = await session.execute(stmt)
    pet = result.scalar_one_or_none()
    if pet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pet not found")
    return pet


async def _save(pet: Pet, session: AsyncSession) -> PetRead:
    pet.touch()
    session.add(pet)
    await session.commit()
    await session.refresh(pet)
    return PetRead.model_validate(pet)


def _discard_photo(storage: PhotoStorage, url: str) -> None:
    """Delete a stored photo; URLs outside the bucket are left alone."""
    path = storage.path_from_url(url)
    if path:
        storage.remove(path)
