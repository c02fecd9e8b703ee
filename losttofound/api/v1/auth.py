"""Authentication endpoints: sign-up, login, logout, current user."""

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field

from losttofound.api.deps import Auth, Identity, Session
from losttofound.models.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


# ── Routes ───────────────────────────────────────────────────

@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignUpRequest, session: Session, identity: Identity) -> TokenResponse:
    """Create an account and sign it in."""
    signed_in = await identity.sign_up(session, body.email, body.password)
    return TokenResponse(
        access_token=signed_in.access_token,
        user=UserRead.model_validate(signed_in.user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: Session, identity: Identity) -> TokenResponse:
    """Authenticate with email + password, receive a JWT."""
    signed_in = await identity.sign_in(session, body.email, body.password)
    return TokenResponse(
        access_token=signed_in.access_token,
        user=UserRead.model_validate(signed_in.user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: Auth, session: Session, identity: Identity) -> None:
    """Revoke the session behind the current token."""
    await identity.sign_out(session, auth.session_id)


@router.get("/me", response_model=UserRead)
async def get_me(auth: Auth) -> UserRead:
    return UserRead.model_validate(auth.user)
