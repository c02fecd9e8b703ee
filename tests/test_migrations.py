"""The alembic schema accepts the rows the models write."""

import importlib.util
import uuid
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from losttofound.models.finder_message import FinderMessage, ReportKind
from losttofound.models.pet import Pet, PetStatus
from losttofound.models.user import User
from losttofound.models.user_profile import Plan, UserProfile

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _load_revision(filename: str):
    spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run_upgrade(connection) -> None:
    revision = _load_revision("3f1a9c2d7b40_create_losttofound_tables.py")
    with Operations.context(MigrationContext.configure(connection)):
        revision.upgrade()


@pytest.fixture
async def migrated_engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(_run_upgrade)
    yield eng
    await eng.dispose()


@pytest.mark.asyncio
async def test_models_insert_into_migrated_schema(migrated_engine):
    async with AsyncSession(migrated_engine, expire_on_commit=False) as session:
        user = User(email="migrated@test.com", password_hash="x")
        session.add(user)
        await session.flush()

        pet = Pet(owner_id=user.id, name="Rex", slug="rex-0001")
        profile = UserProfile(user_id=user.id, plan=Plan.PLUS)
        session.add_all([pet, profile])
        await session.flush()

        session.add(FinderMessage(pet_id=pet.id, report_type=ReportKind.SAW, message="By the pier"))
        pet.status = PetStatus.LOST
        session.add(pet)
        await session.commit()

    async with migrated_engine.connect() as conn:
        assert (await conn.execute(sa.text("SELECT status FROM pets"))).scalar_one() == "lost"
        assert (await conn.execute(sa.text("SELECT plan FROM user_profiles"))).scalar_one() == "plus"
        stored_kind = await conn.execute(sa.text("SELECT report_type FROM finder_messages"))
        assert stored_kind.scalar_one() == "saw"


@pytest.mark.asyncio
async def test_server_defaults_load_as_enums(migrated_engine):
    async with AsyncSession(migrated_engine, expire_on_commit=False) as session:
        user = User(email="defaults@test.com", password_hash="x")
        session.add(user)
        await session.commit()

        profile_id = uuid.uuid4()
        # Omitting the plan column leaves it to the migration's server default
        await session.execute(
            sa.insert(UserProfile.__table__).values(id=profile_id, user_id=user.id)
        )
        await session.commit()

        profile = await session.get(UserProfile, profile_id)
        assert profile.plan is Plan.FREE
