"""
Payment session providers.

A provider turns a priced order into a hosted checkout page on the
restaurant's connected account. ``StripeCheckoutGateway`` is the production
implementation; tests inject their own ``PaymentSessionProvider``.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import stripe

from core_backend.exceptions import PaymentSessionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionLineItem:
    name: str
    unit_amount_cents: int
    quantity: int
    description: str = ""


@dataclass(frozen=True)
class PaymentSession:
    session_id: str
    redirect_url: str


class PaymentSessionProvider(ABC):
    """Creates hosted payment sessions on a tenant's payment account."""

    @abstractmethod
    def create_session(
        self,
        account_id,
        line_items,
        success_url,
        cancel_url,
        metadata,
        currency,
        application_fee_cents=0,
    ) -> PaymentSession:
        """
        Raises:
            PaymentSessionError: the provider rejected the request, timed out
                or could not be reached
        """


class StripeCheckoutGateway(PaymentSessionProvider):
    """
    Stripe Checkout Sessions created as direct charges on a Connect account.

    Uses its own ``StripeClient`` so the API key, API version and network
    timeout are fixed at construction instead of read from module globals.
    """

    def __init__(self, api_key, api_version=None, timeout_seconds=10, client=None):
        if client is None:
            client = stripe.StripeClient(
                api_key,
                stripe_version=api_version,
                http_client=stripe.RequestsClient(timeout=timeout_seconds),
                max_network_retries=0,
            )
        self.client = client

    @staticmethod
    def _build_line_items(line_items, currency):
        return [
            {
                "price_data": {
                    "currency": currency.lower(),
                    "product_data": {
                        "name": item.name,
                        # Stripe rejects empty descriptions and caps them at 500 chars
                        **({"description": item.description[:500]} if item.description else {}),
                    },
                    "unit_amount": item.unit_amount_cents,
                },
                "quantity": item.quantity,
            }
            for item in line_items
        ]

    def create_session(
        self,
        account_id,
        line_items,
        success_url,
        cancel_url,
        metadata,
        currency,
        application_fee_cents=0,
    ):
        payment_intent_data = {"metadata": dict(metadata)}
        if application_fee_cents > 0:
            payment_intent_data["application_fee_amount"] = application_fee_cents

        params = {
            "mode": "payment",
            "line_items": self._build_line_items(line_items, currency),
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": dict(metadata),
            "payment_intent_data": payment_intent_data,
        }
        options = {"stripe_account": account_id}
        if metadata.get("order_id"):
            # A retried request for the same order must not open a second session
            options["idempotency_key"] = f"checkout-{metadata['order_id']}"

        try:
            session = self.client.checkout.sessions.create(params=params, options=options)
        except stripe.StripeError as e:
            logger.error(
                f"Stripe Checkout Session creation failed on account {account_id}: {e}",
                exc_info=True,
            )
            raise PaymentSessionError(f"Stripe error: {e}") from e

        logger.info(f"Created Checkout Session {session.id} on account {account_id}")
        return PaymentSession(session_id=session.id, redirect_url=session.url)
