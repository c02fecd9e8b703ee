"""Sighting report intake: validation and storage of finder messages."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.core.errors import PetNotFoundError, ReportValidationError
from losttofound.models.base import blank_to_none
from losttofound.models.finder_message import FinderMessage, ReportKind
from losttofound.models.pet import Pet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportDraft:
    """A validated, normalized report ready to insert."""
    pet_id: str
    kind: ReportKind
    message: str
    general_location: str | None


def validate_report(
    pet_id: str | uuid.UUID | None,
    report_kind: str | None,
    message: str | None,
    general_location: str | None = None,
) -> ReportDraft:
    """Check a finder's submission and normalize it.

    Raises:
        ReportValidationError: missing pet id or message, or unknown kind.
    """
    if not pet_id or not message or not message.strip():
        raise ReportValidationError("petId and message are required.")

    if report_kind not in (ReportKind.HAVE, ReportKind.SAW):
        raise ReportValidationError("Invalid report type. Expected 'have' or 'saw'.")

    return ReportDraft(
        pet_id=str(pet_id).strip(),
        kind=ReportKind(report_kind),
        message=message.strip(),
        general_location=blank_to_none(general_location),
    )


async def submit_report(
    session: AsyncSession,
    pet_id: str | uuid.UUID | None,
    report_kind: str | None,
    message: str | None,
    general_location: str | None = None,
) -> uuid.UUID:
    """Validate and store a finder message. Returns the new message id."""
    draft = validate_report(pet_id, report_kind, message, general_location)

    try:
        target_id = uuid.UUID(draft.pet_id)
    except ValueError as exc:
        raise PetNotFoundError() from exc

    pet = await session.get(Pet, target_id)
    if pet is None:
        raise PetNotFoundError()

    row = FinderMessage(
        pet_id=target_id,
        report_type=draft.kind,
        message=draft.message,
        general_location=draft.general_location,
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)

    logger.info("Stored %s report %s for pet %s", draft.kind, row.id, target_id)
    return row.id


async def list_reports(session: AsyncSession, pet_ids: list[uuid.UUID]) -> list[FinderMessage]:
    """Finder messages for the given pets, newest first."""
    if not pet_ids:
        return []
    stmt = (
        select(FinderMessage)
        .where(FinderMessage.pet_id.in_(pet_ids))  # type: ignore[attr-defined]
        .order_by(FinderMessage.created_at.desc())  # type: ignore[attr-defined]
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
