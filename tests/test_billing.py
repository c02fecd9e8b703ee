"""Billing endpoints against a mocked Stripe API."""

from urllib.parse import parse_qs

import httpx
import pytest
from httpx import AsyncClient

from losttofound.core.config import Settings
from losttofound.core.errors import ConfigurationError, UpstreamError
from losttofound.main import app
from losttofound.services.payments import PaymentGateway, get_payment_gateway


class FakeStripe:
    """Records requests and answers like the Stripe API would."""

    def __init__(self, fail: bool = False) -> None:
        self.requests: list[tuple[str, dict]] = []
        self.fail = fail

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        self.requests.append((request.url.path, form))
        assert request.headers["Authorization"] == "Bearer sk_test_123"

        if self.fail:
            return httpx.Response(402, json={"error": {"message": "card_declined"}})
        if request.url.path.endswith("/checkout/sessions"):
            return httpx.Response(200, json={"id": "cs_1", "url": "https://checkout.stripe.test/cs_1"})
        if request.url.path.endswith("/customers"):
            return httpx.Response(200, json={"id": "cus_42"})
        if request.url.path.endswith("/billing_portal/sessions"):
            return httpx.Response(200, json={"id": "bps_1", "url": "https://billing.stripe.test/p/1"})
        return httpx.Response(404, json={})


def _gateway(fake: FakeStripe, **overrides) -> PaymentGateway:
    settings = Settings(
        stripe_secret_key=overrides.get("secret", "sk_test_123"),
        stripe_price_id=overrides.get("price", "price_plus"),
        stripe_api_base="https://api.stripe.test/v1",
        site_url="https://losttofound.test",
    )
    return PaymentGateway(settings=settings, transport=httpx.MockTransport(fake))


async def _signup(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/v1/auth/signup", json={"email": email, "password": "password1234"})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.mark.asyncio
async def test_checkout_session(client: AsyncClient):
    fake = FakeStripe()
    app.dependency_overrides[get_payment_gateway] = lambda: _gateway(fake)
    headers = await _signup(client, "checkout@test.com")

    resp = await client.post(
        "/v1/billing/create-checkout-session",
        headers={**headers, "Origin": "https://app.losttofound.test"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"ok": True, "url": "https://checkout.stripe.test/cs_1"}

    path, form = fake.requests[0]
    assert path == "/v1/checkout/sessions"
    assert form["mode"] == "subscription"
    assert form["line_items[0][price]"] == "price_plus"
    assert form["success_url"] == "https://app.losttofound.test/billing?status=success"
    assert form["cancel_url"] == "https://app.losttofound.test/billing?status=cancelled"
    assert form["customer_email"] == "checkout@test.com"


@pytest.mark.asyncio
async def test_checkout_without_price_is_config_error(client: AsyncClient):
    fake = FakeStripe()
    app.dependency_overrides[get_payment_gateway] = lambda: _gateway(fake, price="")
    headers = await _signup(client, "checkout-noprice@test.com")

    resp = await client.post("/v1/billing/create-checkout-session", headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Stripe is not configured on the server (price ID missing)."}
    assert fake.requests == []


@pytest.mark.asyncio
async def test_portal_creates_customer_once(client: AsyncClient):
    fake = FakeStripe()
    app.dependency_overrides[get_payment_gateway] = lambda: _gateway(fake)
    headers = await _signup(client, "portal@test.com")

    for _ in range(2):
        resp = await client.post("/v1/billing/create-portal-session", headers=headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["url"] == "https://billing.stripe.test/p/1"

    paths = [path for path, _ in fake.requests]
    assert paths.count("/v1/customers") == 1
    assert paths.count("/v1/billing_portal/sessions") == 2
    portal_form = fake.requests[-1][1]
    assert portal_form["customer"] == "cus_42"

    resp = await client.get("/v1/profile", headers=headers)
    assert resp.json()["has_billing_account"] is True


@pytest.mark.asyncio
async def test_upstream_failure_is_generic_error(client: AsyncClient):
    fake = FakeStripe(fail=True)
    app.dependency_overrides[get_payment_gateway] = lambda: _gateway(fake)
    headers = await _signup(client, "portal-fail@test.com")

    resp = await client.post("/v1/billing/create-portal-session", headers=headers)
    assert resp.status_code == 502
    assert resp.json() == {"error": "The payment provider rejected the request."}


@pytest.mark.asyncio
async def test_gateway_requires_secret_key():
    gateway = _gateway(FakeStripe(), secret="")
    with pytest.raises(ConfigurationError):
        await gateway.create_customer("someone@test.com")


@pytest.mark.asyncio
async def test_gateway_network_error():
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    settings = Settings(stripe_secret_key="sk_test_123", stripe_api_base="https://api.stripe.test/v1")
    gateway = PaymentGateway(settings=settings, transport=httpx.MockTransport(_boom))
    with pytest.raises(UpstreamError) as exc_info:
        await gateway.create_billing_portal_session("cus_1", "https://x.test/billing")
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(200, json={"object": "customer"}),
    httpx.Response(200, text="<html>gateway timeout</html>"),
    httpx.Response(200, json=["cus_42"]),
])
async def test_gateway_unreadable_customer_response(response: httpx.Response):
    settings = Settings(stripe_secret_key="sk_test_123", stripe_api_base="https://api.stripe.test/v1")
    gateway = PaymentGateway(settings=settings, transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(UpstreamError) as exc_info:
        await gateway.create_customer("someone@test.com")
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_portal_without_url_is_error_envelope(client: AsyncClient):
    def _no_url(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/customers"):
            return httpx.Response(200, json={"id": "cus_42"})
        return httpx.Response(200, json={"id": "bps_1"})

    settings = Settings(stripe_secret_key="sk_test_123", stripe_api_base="https://api.stripe.test/v1")
    app.dependency_overrides[get_payment_gateway] = lambda: PaymentGateway(
        settings=settings, transport=httpx.MockTransport(_no_url),
    )
    headers = await _signup(client, "portal-nourl@test.com")

    resp = await client.post("/v1/billing/create-portal-session", headers=headers)
    assert resp.status_code == 502
    assert resp.json() == {"error": "Stripe did not return a billing portal URL."}
