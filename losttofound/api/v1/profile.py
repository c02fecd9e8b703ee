"""Account profile and owner dashboard."""

from fastapi import APIRouter
from sqlmodel import select

from losttofound.api.deps import Auth, Session
from losttofound.models.pet import Pet
from losttofound.models.user_profile import UserProfileRead
from losttofound.services.entitlements import plan_features
from losttofound.services.finder_reports import list_reports
from losttofound.services.presentation import DashboardView, dashboard_view
from losttofound.services.subscriptions import get_or_create_profile

router = APIRouter(tags=["profile"])


@router.get("/profile", response_model=UserProfileRead)
async def get_profile(auth: Auth, session: Session) -> UserProfileRead:
    """Current plan and entitlements. Creates a free profile on first access."""
    profile = await get_or_create_profile(session, auth.user_id)
    return UserProfileRead(
        user_id=profile.user_id,
        plan=profile.plan,
        has_billing_account=profile.stripe_customer_id is not None,
        features=plan_features(profile.plan),
    )


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(auth: Auth, session: Session) -> DashboardView:
    """Owner dashboard: plan, pets, finder messages and counts."""
    profile = await get_or_create_profile(session, auth.user_id)

    result = await session.execute(
        select(Pet)
        .where(Pet.owner_id == auth.user_id)
        .order_by(Pet.created_at.asc())  # type: ignore[attr-defined]
    )
    pets = list(result.scalars().all())
    messages = await list_reports(session, [p.id for p in pets])

    return dashboard_view(profile.plan, pets, messages)
