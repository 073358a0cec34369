"""
Normalized payment events.

Stripe webhook payloads are reduced to the few facts the order lifecycle
needs before anything else looks at them.
"""
from dataclasses import dataclass
from typing import Optional

CHECKOUT_COMPLETED_TYPES = (
    "checkout.session.completed",
    "checkout.session.async_payment_succeeded",
)
CHECKOUT_EXPIRED_TYPES = (
    "checkout.session.expired",
    "checkout.session.async_payment_failed",
)


@dataclass(frozen=True)
class CheckoutCompleted:
    session_id: str
    amount_total_cents: Optional[int]
    account_id: Optional[str] = None
    event_id: Optional[str] = None


@dataclass(frozen=True)
class CheckoutExpired:
    session_id: str
    account_id: Optional[str] = None
    event_id: Optional[str] = None


@dataclass(frozen=True)
class UnknownEvent:
    event_type: str
    event_id: Optional[str] = None


def event_field(obj, key):
    """Optional field of a Stripe object or plain dict; item access only."""
    return obj[key] if key in obj else None


def parse_event(event):
    """
    Map a verified Stripe event to CheckoutCompleted, CheckoutExpired or
    UnknownEvent.

    A completed session whose payment is still pending (delayed payment
    methods) is not a payment yet and is reported as UnknownEvent; the
    matching ``async_payment_succeeded`` event completes it later.
    """
    event_type = event["type"]
    event_id = event_field(event, "id")
    account_id = event_field(event, "account")

    if event_type not in CHECKOUT_COMPLETED_TYPES + CHECKOUT_EXPIRED_TYPES:
        return UnknownEvent(event_type=event_type, event_id=event_id)

    session = event["data"]["object"]
    session_id = session["id"]

    if event_type in CHECKOUT_EXPIRED_TYPES:
        return CheckoutExpired(session_id=session_id, account_id=account_id, event_id=event_id)

    payment_status = event_field(session, "payment_status")
    if payment_status not in ("paid", "no_payment_required"):
        return UnknownEvent(event_type=f"{event_type}:{payment_status}", event_id=event_id)

    return CheckoutCompleted(
        session_id=session_id,
        amount_total_cents=event_field(session, "amount_total"),
        account_id=account_id,
        event_id=event_id,
    )
