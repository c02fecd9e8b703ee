"""Pet status state machine.

Every pet starts at ``home``. Owners move it with explicit commands; any
state may go to any other state and none is terminal. Lost-board
membership is derived from the status, never stored separately.
"""

from __future__ import annotations

import logging
import uuid
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.core.errors import PetNotFoundError
from losttofound.models.pet import Pet, PetStatus

logger = logging.getLogger(__name__)


class StatusCommand(StrEnum):
    MARK_LOST = "mark_lost"
    MARK_HOME = "mark_home"
    MARK_FOUND = "mark_found"


_TARGETS: dict[StatusCommand, PetStatus] = {
    StatusCommand.MARK_LOST: PetStatus.LOST,
    StatusCommand.MARK_HOME: PetStatus.HOME,
    StatusCommand.MARK_FOUND: PetStatus.FOUND,
}

INITIAL_STATUS = PetStatus.HOME


def apply_command(current: PetStatus, command: StatusCommand) -> PetStatus:
    """Return the status a pet ends up in after ``command``.

    Transitions are total and unconditional, so ``current`` only matters
    for logging by callers.
    """
    return _TARGETS[StatusCommand(command)]


def command_for(status: PetStatus) -> StatusCommand:
    """Inverse of ``apply_command``: the command that yields ``status``."""
    for command, target in _TARGETS.items():
        if target == status:
            return command
    raise ValueError(f"unknown pet status: {status!r}")


def is_on_lost_board(status: PetStatus) -> bool:
    return status == PetStatus.LOST


def lost_board_query():
    """Select statement for the public lost board, most recently updated first."""
    return (
        select(Pet)
        .where(Pet.status == PetStatus.LOST)
        .order_by(Pet.updated_at.desc())  # type: ignore[attr-defined]
    )


async def change_pet_status(
    session: AsyncSession,
    owner_id: uuid.UUID,
    pet_id: uuid.UUID,
    command: StatusCommand,
) -> Pet:
    """Apply a status command to an owned pet and persist it.

    Raises ``PetNotFoundError`` if the pet does not exist or belongs to
    another account. The returned pet reflects the committed row.
    """
    result = await session.execute(
        select(Pet).where(Pet.id == pet_id, Pet.owner_id == owner_id)
    )
    pet = result.scalar_one_or_none()
    if pet is None:
        raise PetNotFoundError()

    previous = pet.status
    pet.status = apply_command(previous, command)
    pet.touch()
    session.add(pet)
    await session.commit()
    await session.refresh(pet)

    logger.info("Pet %s status %s -> %s", pet.id, previous, pet.status)
    return pet
