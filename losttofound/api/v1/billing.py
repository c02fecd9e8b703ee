"""Billing endpoints: Stripe checkout, billing portal, and plan confirmation."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from losttofound.api.deps import Auth, Payments, Session
from losttofound.core.config import get_settings
from losttofound.models.user_profile import Plan
from losttofound.services.subscriptions import confirm_plus, ensure_stripe_customer

router = APIRouter(prefix="/billing", tags=["billing"])


class BillingRedirect(BaseModel):
    ok: bool = True
    url: str


class MarkPlusResponse(BaseModel):
    ok: bool = True
    plan: Plan


def _origin(request: Request) -> str:
    """Front-end origin used to build return URLs."""
    return (request.headers.get("origin") or get_settings().site_url).rstrip("/")


@router.post("/create-checkout-session", response_model=BillingRedirect)
async def create_checkout_session(
    request: Request,
    auth: Auth,
    payments: Payments,
) -> BillingRedirect:
    origin = _origin(request)
    url = await payments.create_checkout_session(
        success_url=f"{origin}/billing?status=success",
        cancel_url=f"{origin}/billing?status=cancelled",
        customer_email=auth.user.email,
        client_reference_id=str(auth.user_id),
    )
    return BillingRedirect(url=url)


@router.post("/create-portal-session", response_model=BillingRedirect)
async def create_portal_session(
    auth: Auth,
    session: Session,
    payments: Payments,
) -> BillingRedirect:
    """Open the Stripe billing portal, creating the customer on first use."""
    customer_id = await ensure_stripe_customer(session, payments, auth.user)
    url = await payments.create_billing_portal_session(
        customer_id=customer_id,
        return_url=f"{get_settings().site_url.rstrip('/')}/billing",
    )
    return BillingRedirect(url=url)


@router.post("/mark-plus", response_model=MarkPlusResponse)
async def mark_plus(auth: Auth, session: Session) -> MarkPlusResponse:
    """Confirm a completed checkout. Safe to call repeatedly."""
    profile = await confirm_plus(session, auth.user_id)
    return MarkPlusResponse(plan=profile.plan)
