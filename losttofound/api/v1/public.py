"""Unauthenticated read endpoints: public pet pages and the lost board."""

from fastapi import APIRouter, HTTPException, status
from sqlmodel import select

from losttofound.api.deps import Session
from losttofound.models.pet import LostBoardCard, Pet, PetPublicRead
from losttofound.services.pet_status import lost_board_query
from losttofound.services.presentation import lost_board_card, public_pet_view

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/pets/{slug}", response_model=PetPublicRead)
async def get_public_pet(slug: str, session: Session) -> PetPublicRead:
    """Public profile behind a pet's tag. Contact fields are never included."""
    result = await session.execute(select(Pet).where(Pet.slug == slug))
    pet = result.scalar_one_or_none()
    if pet is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No pet found for this tag.",
        )
    return public_pet_view(pet)


@router.get("/lost", response_model=list[LostBoardCard])
async def lost_board(session: Session) -> list[LostBoardCard]:
    """Every pet currently marked lost, most recently updated first."""
    result = await session.execute(lost_board_query())
    return [lost_board_card(p) for p in result.scalars().all()]
