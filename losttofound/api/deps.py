"""FastAPI dependencies for authentication and gateway resolution."""

import uuid
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from losttofound.core.database import get_session
from losttofound.core.errors import AuthenticationError
from losttofound.models.user import User
from losttofound.services.identity import IdentityGateway, get_identity
from losttofound.services.payments import PaymentGateway, get_payment_gateway
from losttofound.services.storage import PhotoStorage, get_photo_storage

# Missing credentials are reported through AuthenticationError, not the scheme's own 403
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user", "session_id")

    def __init__(self, user: User, session_id: uuid.UUID) -> None:
        self.user = user
        self.session_id = session_id

    @property
    def user_id(self) -> uuid.UUID:
        return self.user.id


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
    identity: Annotated[IdentityGateway, Depends(get_identity)],
) -> AuthContext:
    """Resolve the bearer token to the current user, once per request."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user, auth_session = await identity.get_current_user(session, credentials.credentials)
    return AuthContext(user=user, session_id=auth_session.id)


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
Session = Annotated[AsyncSession, Depends(get_session)]
Identity = Annotated[IdentityGateway, Depends(get_identity)]
Payments = Annotated[PaymentGateway, Depends(get_payment_gateway)]
Storage = Annotated[PhotoStorage, Depends(get_photo_storage)]
