import logging

from django.conf import settings

from core_backend.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    TenantMismatchError,
)
from tenant.services import TenantService

from .events import CheckoutCompleted, CheckoutExpired, UnknownEvent
from .money import platform_fee_cents
from .strategies import SessionLineItem

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 500


class CheckoutService:
    """
    Turns a customer's cart into a NEW order plus a hosted payment page, and
    reconciles the order when the payment provider reports back.

    Collaborators:
        lifecycle: ``orders.services.OrderLifecycleService``; the only writer
            of order rows
        gateway: a ``payments.strategies.PaymentSessionProvider``
        menu: authoritative menu lookup (``menu.services.MenuService``)
    """

    def __init__(self, lifecycle, gateway, menu):
        self.lifecycle = lifecycle
        self.gateway = gateway
        self.menu = menu

    def initiate_checkout(self, slug, table_code, cart_lines, tip_rate_bps=None, notes=None):
        """
        Create a priced NEW order and a payment session for it.

        Args:
            slug: restaurant slug
            table_code: table code from the QR link; may be empty for pickup
            cart_lines: dicts with ``menu_item_id``, ``quantity``,
                ``modifier_ids`` and optional ``notes``; client prices are
                never read

        Returns:
            dict with ``url`` (hosted payment page) and ``order_id``

        Raises:
            TenantNotFoundError, TableNotFoundError, PaymentsNotConfiguredError,
            ItemUnavailableError, InvalidCartError, PersistenceError,
            PaymentSessionError. When the session cannot be created the order
            stays NEW without a session id and is later swept up by the
            abandoned-order cleanup.
        """
        tenant, table = TenantService.resolve_for_ordering(slug, table_code)
        TenantService.ensure_payments_ready(tenant)

        lines = self.menu.resolve_cart(tenant, cart_lines)
        order = self.lifecycle.create(
            lines, tenant, table=table, tip_rate_bps=tip_rate_bps, notes=notes
        )

        metadata = {"order_id": str(order.id), "tenant_id": str(tenant.id)}
        if table is not None:
            metadata["table_code"] = table.code

        session = self.gateway.create_session(
            account_id=tenant.stripe_account_id,
            line_items=self._session_line_items(order, lines),
            success_url=self._success_url(order),
            cancel_url=self._cancel_url(tenant, table),
            metadata=metadata,
            currency=tenant.currency,
            application_fee_cents=platform_fee_cents(order.total_cents),
        )

        self.lifecycle.attach_payment_session(order, session.session_id)
        logger.info(
            f"Checkout started for order {order.code} ({order.id}) at {tenant.slug}, "
            f"session {session.session_id}"
        )
        return {"url": session.redirect_url, "order_id": order.id}

    def handle_payment_notification(self, event):
        """
        Apply a verified payment event to its order. Safe to call again with
        the same event: repeats are no-ops.

        Returns the affected order, or None when nothing was done.

        Raises:
            PersistenceError: the order could not be updated; the provider
                should redeliver
        """
        if isinstance(event, CheckoutCompleted):
            return self._apply(
                event,
                lambda: self.lifecycle.mark_paid(
                    event.session_id, event.amount_total_cents, account_id=event.account_id
                ),
            )

        if isinstance(event, CheckoutExpired):
            return self._apply(event, lambda: self._cancel_expired(event))

        if isinstance(event, UnknownEvent):
            logger.warning(f"Ignoring payment event {event.event_type} ({event.event_id})")
            return None

        raise TypeError(f"Unsupported payment event {event!r}")

    def _cancel_expired(self, event):
        if event.account_id is not None:
            order = self.lifecycle.get_order_by_session(event.session_id)
            if order.tenant.stripe_account_id != event.account_id:
                raise TenantMismatchError(
                    f"Session {event.session_id} does not belong to account {event.account_id}"
                )
        return self.lifecycle.cancel_unpaid(event.session_id)

    @staticmethod
    def _apply(event, handler):
        # Conflicts are final for this event; redelivery would fail the same way
        try:
            return handler()
        except NotFoundError:
            logger.warning(f"Payment event {event.event_id} references unknown session {event.session_id}")
        except TenantMismatchError as e:
            logger.error(f"Payment event {event.event_id} rejected: {e}")
        except InvalidTransitionError as e:
            logger.warning(f"Payment event {event.event_id} for session {event.session_id} not applied: {e}")
        return None

    @staticmethod
    def _session_line_items(order, lines):
        items = []
        for line in lines:
            details = [m.name for m in line.modifiers]
            if line.notes:
                details.append(f"Note: {line.notes}")
            items.append(
                SessionLineItem(
                    name=line.name,
                    unit_amount_cents=line.unit_total_cents,
                    quantity=line.quantity,
                    description=", ".join(details)[:DESCRIPTION_MAX_LENGTH],
                )
            )

        # Tax and tip are charged as their own lines so the session total is the order total
        if order.tax_cents:
            items.append(SessionLineItem(name="Tax", unit_amount_cents=order.tax_cents, quantity=1))
        if order.tip_cents:
            items.append(SessionLineItem(name="Tip", unit_amount_cents=order.tip_cents, quantity=1))
        return items

    @staticmethod
    def _success_url(order):
        return f"{settings.APP_URL}/order/{order.id}?success=true"

    @staticmethod
    def _cancel_url(tenant, table):
        if table is not None:
            return f"{settings.APP_URL}/r/{tenant.slug}/t/{table.code}?canceled=true"
        return f"{settings.APP_URL}/r/{tenant.slug}?canceled=true"
