"""Identity gateway: sign-up, sign-in, current user, sign-out.

Sign-in creates an ``AuthSession`` row and returns a JWT naming it, so a
sign-out can revoke the token before it expires. Changes are published to
``AuthEvents`` subscribers instead of being held in shared state.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from losttofound.core.config import get_settings
from losttofound.core.errors import AuthenticationError, ConflictError
from losttofound.core.security import create_jwt, decode_jwt, hash_password, verify_password
from losttofound.models.auth_session import AuthSession
from losttofound.models.base import utcnow
from losttofound.models.user import User

logger = logging.getLogger(__name__)


class AuthEvent(StrEnum):
    SIGNED_UP = "signed_up"
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


AuthListener = Callable[[AuthEvent, User], None | Awaitable[None]]


class AuthEvents:
    """Subscribe-to-change registry for authentication events."""

    def __init__(self) -> None:
        self._listeners: list[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def publish(self, event: AuthEvent, user: User) -> None:
        """Notify every listener. A failing listener never blocks the others."""
        for listener in list(self._listeners):
            try:
                result = listener(event, user)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Auth listener failed for %s on user %s", event, user.id)


@dataclass
class SignedIn:
    user: User
    access_token: str
    session_id: uuid.UUID


class IdentityGateway:
    def __init__(self, events: AuthEvents) -> None:
        self.events = events

    async def sign_up(self, session: AsyncSession, email: str, password: str) -> SignedIn:
        email = email.strip().lower()
        existing = await session.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("An account with this email already exists.")

        user = User(email=email, password_hash=hash_password(password))
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as exc:
            # A concurrent sign-up claimed the address after the check above
            await session.rollback()
            raise ConflictError("An account with this email already exists.") from exc
        await self.events.publish(AuthEvent.SIGNED_UP, user)
        return await self._open_session(session, user)

    async def sign_in(self, session: AsyncSession, email: str, password: str) -> SignedIn:
        result = await session.execute(select(User).where(User.email == email.strip().lower()))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")

        return await self._open_session(session, user)

    async def get_current_user(self, session: AsyncSession, token: str) -> tuple[User, AuthSession]:
        """Resolve a bearer token to its user and live auth session."""
        try:
            payload = decode_jwt(token)
            user_id = uuid.UUID(payload["sub"])
            session_id = uuid.UUID(payload["sid"])
        except JWTError as exc:
            raise AuthenticationError("Invalid or expired token") from exc
        except (KeyError, ValueError) as exc:
            raise AuthenticationError("Malformed token payload") from exc

        auth_session = await session.get(AuthSession, session_id)
        if (
            auth_session is None
            or not auth_session.is_active
            or auth_session.user_id != user_id
            or auth_session.expires_at < utcnow()
        ):
            raise AuthenticationError("Session has ended")

        user = await session.get(User, user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("Account is disabled")

        auth_session.last_used_at = utcnow()
        session.add(auth_session)
        await session.commit()
        return user, auth_session

    async def sign_out(self, session: AsyncSession, session_id: uuid.UUID) -> None:
        auth_session = await session.get(AuthSession, session_id)
        if auth_session is None or not auth_session.is_active:
            return
        auth_session.is_active = False
        auth_session.touch()
        session.add(auth_session)
        await session.commit()

        user = await session.get(User, auth_session.user_id)
        if user is not None:
            await self.events.publish(AuthEvent.SIGNED_OUT, user)

    async def _open_session(self, session: AsyncSession, user: User) -> SignedIn:
        lifetime = timedelta(minutes=get_settings().jwt_expire_minutes)
        auth_session = AuthSession(user_id=user.id, expires_at=utcnow() + lifetime)
        session.add(auth_session)
        await session.commit()
        await session.refresh(user)

        token = create_jwt(
            subject=str(user.id),
            session_id=str(auth_session.id),
            expires_delta=lifetime,
        )
        await self.events.publish(AuthEvent.SIGNED_IN, user)
        return SignedIn(user=user, access_token=token, session_id=auth_session.id)


auth_events = AuthEvents()
identity = IdentityGateway(auth_events)


def get_identity() -> IdentityGateway:
    """FastAPI dependency returning the process-wide identity gateway."""
    return identity


def log_auth_event(event: AuthEvent, user: User) -> None:
    logger.info("Auth event %s for user %s", event, user.id)
