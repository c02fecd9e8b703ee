"""Subscription workflows: lazy profile creation and plus confirmation."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.models.user import User
from losttofound.models.user_profile import Plan, UserProfile
from losttofound.services.payments import PaymentGateway

logger = logging.getLogger(__name__)


async def _find_profile(session: AsyncSession, user_id: uuid.UUID) -> UserProfile | None:
    result = await session.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_profile(session: AsyncSession, user_id: uuid.UUID) -> UserProfile:
    """Return the account's profile, creating a free one on first access."""
    profile = await _find_profile(session, user_id)
    if profile is not None:
        return profile

    profile = UserProfile(user_id=user_id, plan=Plan.FREE)
    session.add(profile)
    try:
        await session.commit()
    except IntegrityError:
        # Another request created it first
        await session.rollback()
        profile = await _find_profile(session, user_id)
        if profile is None:
            raise
        return profile
    await session.refresh(profile)
    return profile


async def confirm_plus(session: AsyncSession, user_id: uuid.UUID) -> UserProfile:
    """Record a completed checkout by moving the account to plus.

    Idempotent: repeated calls leave exactly one profile with plan=plus.
    A missing profile is created directly on plus.
    """
    profile = await _find_profile(session, user_id)
    if profile is None:
        profile = UserProfile(user_id=user_id, plan=Plan.PLUS)
        session.add(profile)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            profile = await _find_profile(session, user_id)
            if profile is None:
                raise
        else:
            await session.refresh(profile)
            logger.info("Created plus profile for user %s", user_id)
            return profile

    if profile.plan != Plan.PLUS:
        profile.plan = Plan.PLUS
        profile.touch()
        session.add(profile)
        await session.commit()
        await session.refresh(profile)
        logger.info("Upgraded user %s to plus", user_id)
    return profile


async def ensure_stripe_customer(
    session: AsyncSession,
    payments: PaymentGateway,
    user: User,
) -> str:
    """Return the account's Stripe customer id, creating the customer if needed."""
    profile = await get_or_create_profile(session, user.id)
    if profile.stripe_customer_id:
        return profile.stripe_customer_id

    customer_id = await payments.create_customer(email=user.email, user_id=str(user.id))
    profile.stripe_customer_id = customer_id
    profile.touch()
    session.add(profile)
    await session.commit()
    return customer_id
