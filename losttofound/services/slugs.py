"""Public slug generation for pet pages."""

from __future__ import annotations

import re
import secrets

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.models.pet import Pet

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 4
MAX_ATTEMPTS = 10


def _suffix() -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))


def slugify(name: str, suffix: str | None = None) -> str:
    """Lowercase ``name``, dash-separate it and append a short random suffix.

    ``"Mr. Whiskers!"`` becomes something like ``"mr-whiskers-k3x9"``. A name
    with no usable characters yields ``"pet-<suffix>"``.
    """
    base = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "pet"
    return f"{base}-{suffix or _suffix()}"


async def generate_unique_slug(session: AsyncSession, name: str) -> str:
    """Return a slug not yet used by any pet."""
    for _ in range(MAX_ATTEMPTS):
        candidate = slugify(name)
        existing = await session.execute(select(Pet.id).where(Pet.slug == candidate))
        if existing.first() is None:
            return candidate
    # Fall back to a longer suffix; collisions at this length are negligible
    return slugify(name, suffix=secrets.token_hex(6))
