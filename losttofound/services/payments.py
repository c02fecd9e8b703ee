"""Payment gateway: Stripe checkout, customers and billing portal over HTTP."""

from __future__ import annotations

import logging

import httpx
from fastapi import status

from losttofound.core.config import Settings, get_settings
from losttofound.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Thin client for the parts of the Stripe API the billing flow uses."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport

    def _secret_key(self) -> str:
        if not self.settings.stripe_secret_key:
            logger.error("Missing STRIPE_SECRET_KEY environment variable")
            raise ConfigurationError("Stripe is not configured on the server (secret key missing).")
        return self.settings.stripe_secret_key

    async def _post(self, path: str, data: dict[str, str]) -> dict:
        secret = self._secret_key()
        url = f"{self.settings.stripe_api_base.rstrip('/')}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
                resp = await client.post(
                    url,
                    data=data,
                    headers={"Authorization": f"Bearer {secret}"},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Stripe request to %s failed with %s: %s",
                path, exc.response.status_code, exc.response.text,
            )
            raise UpstreamError(
                "The payment provider rejected the request.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Stripe request to %s failed", path)
            raise UpstreamError(
                "Could not reach the payment provider.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from exc
        except ValueError as exc:
            logger.error("Stripe returned a non-JSON response for %s", path)
            raise UpstreamError(
                "The payment provider returned an unreadable response.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from exc

        if not isinstance(payload, dict):
            logger.error("Stripe returned an unexpected payload for %s", path)
            raise UpstreamError(
                "The payment provider returned an unreadable response.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )
        return payload

    @staticmethod
    def _require(payload: dict, key: str, what: str) -> str:
        value = payload.get(key)
        if not value:
            logger.error("Stripe did not return a %s", what)
            raise UpstreamError(
                f"Stripe did not return a {what}.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )
        return value

    async def create_checkout_session(
        self,
        success_url: str,
        cancel_url: str,
        price_id: str | None = None,
        customer_email: str | None = None,
        client_reference_id: str | None = None,
    ) -> str:
        """Create a subscription checkout session and return its redirect URL."""
        price = price_id or self.settings.stripe_price_id
        if not price:
            logger.error("Missing STRIPE_PRICE_ID environment variable")
            raise ConfigurationError("Stripe is not configured on the server (price ID missing).")

        data = {
            "mode": "subscription",
            "line_items[0][price]": price,
            "line_items[0][quantity]": "1",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "allow_promotion_codes": "true",
        }
        if customer_email:
            data["customer_email"] = customer_email
        if client_reference_id:
            data["client_reference_id"] = client_reference_id

        session = await self._post("checkout/sessions", data)
        return self._require(session, "url", "checkout URL")

    async def create_customer(self, email: str, user_id: str | None = None) -> str:
        """Create a Stripe customer and return its id."""
        data = {"email": email}
        if user_id:
            data["metadata[losttofound_user_id]"] = user_id
        customer = await self._post("customers", data)
        return self._require(customer, "id", "customer id")

    async def create_billing_portal_session(self, customer_id: str, return_url: str) -> str:
        """Create a billing portal session and return its redirect URL."""
        portal = await self._post(
            "billing_portal/sessions",
            {"customer": customer_id, "return_url": return_url},
        )
        return self._require(portal, "url", "billing portal URL")


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency returning the configured payment gateway."""
    return PaymentGateway()
