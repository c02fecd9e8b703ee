"""Pet status state machine and the status-change endpoint."""

import uuid

import pytest
from httpx import AsyncClient

from losttofound.core.errors import PetNotFoundError
from losttofound.models.pet import Pet, PetStatus
from losttofound.models.user import User
from losttofound.services.pet_status import (
    INITIAL_STATUS,
    StatusCommand,
    apply_command,
    change_pet_status,
    command_for,
    is_on_lost_board,
)


@pytest.mark.parametrize("current", list(PetStatus))
@pytest.mark.parametrize(
    ("command", "expected"),
    [
        (StatusCommand.MARK_LOST, PetStatus.LOST),
        (StatusCommand.MARK_HOME, PetStatus.HOME),
        (StatusCommand.MARK_FOUND, PetStatus.FOUND),
    ],
)
def test_transitions_are_total(current, command, expected):
    assert apply_command(current, command) == expected


def test_initial_status_is_home():
    assert INITIAL_STATUS == PetStatus.HOME


def test_command_for_round_trips():
    for status in PetStatus:
        assert apply_command(PetStatus.HOME, command_for(status)) == status


def test_lost_board_membership():
    assert is_on_lost_board(PetStatus.LOST) is True
    assert is_on_lost_board(PetStatus.HOME) is False
    assert is_on_lost_board(PetStatus.FOUND) is False


async def _make_pet(session, email: str) -> Pet:
    user = User(email=email, password_hash="x")
    session.add(user)
    await session.flush()
    pet = Pet(owner_id=user.id, name="Rex", slug=f"rex-{uuid.uuid4().hex[:6]}")
    session.add(pet)
    await session.commit()
    return pet


@pytest.mark.asyncio
async def test_change_status_workflow(session):
    pet = await _make_pet(session, "owner@status.com")

    updated = await change_pet_status(session, pet.owner_id, pet.id, StatusCommand.MARK_LOST)
    assert updated.status == PetStatus.LOST

    # Skipping "found" is allowed
    updated = await change_pet_status(session, pet.owner_id, pet.id, StatusCommand.MARK_HOME)
    assert updated.status == PetStatus.HOME


@pytest.mark.asyncio
async def test_change_status_rejects_other_owner(session):
    pet = await _make_pet(session, "owner@status-iso.com")

    with pytest.raises(PetNotFoundError):
        await change_pet_status(session, uuid.uuid4(), pet.id, StatusCommand.MARK_LOST)

    await session.refresh(pet)
    assert pet.status == PetStatus.HOME


@pytest.mark.asyncio
async def test_change_status_rejects_missing_pet(session):
    with pytest.raises(PetNotFoundError):
        await change_pet_status(session, uuid.uuid4(), uuid.uuid4(), StatusCommand.MARK_FOUND)


# ── HTTP ──────────────────────────────────────────────────────

async def _signup(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/v1/auth/signup", json={"email": email, "password": "password1234"})
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.mark.asyncio
async def test_status_endpoint_accepts_command_or_status(client: AsyncClient):
    headers = await _signup(client, "status-http@test.com")
    resp = await client.post("/v1/pets", json={"name": "Mochi"}, headers=headers)
    pet = resp.json()
    assert pet["status"] == "home"

    resp = await client.post(
        f"/v1/pets/{pet['id']}/status", json={"command": "mark_lost"}, headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "lost"

    resp = await client.post(
        f"/v1/pets/{pet['id']}/status", json={"status": "found"}, headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "found"

    # Persisted, not just echoed
    resp = await client.get(f"/v1/pets/{pet['id']}", headers=headers)
    assert resp.json()["status"] == "found"


@pytest.mark.asyncio
async def test_status_endpoint_validates_body(client: AsyncClient):
    headers = await _signup(client, "status-body@test.com")
    resp = await client.post("/v1/pets", json={"name": "Mochi"}, headers=headers)
    pet_id = resp.json()["id"]

    resp = await client.post(f"/v1/pets/{pet_id}/status", json={}, headers=headers)
    assert resp.status_code == 422

    resp = await client.post(
        f"/v1/pets/{pet_id}/status", json={"command": "mark_missing"}, headers=headers,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_status_endpoint_other_owner_404(client: AsyncClient):
    owner = await _signup(client, "status-a@test.com")
    stranger = await _signup(client, "status-b@test.com")
    resp = await client.post("/v1/pets", json={"name": "Mochi"}, headers=owner)
    pet_id = resp.json()["id"]

    resp = await client.post(
        f"/v1/pets/{pet_id}/status", json={"command": "mark_lost"}, headers=stranger,
    )
    assert resp.status_code == 404

    resp = await client.get(f"/v1/pets/{pet_id}", headers=owner)
    assert resp.json()["status"] == "home"
