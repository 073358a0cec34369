import logging
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from core_backend.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    TenantMismatchError,
)
from orders.calculators import compute_totals
from orders.models import VALID_STATUS_TRANSITIONS, Order, OrderLine
from orders.serializers import order_snapshot

logger = logging.getLogger(__name__)


class OrderLifecycleService:
    """
    Owns the order row and its status.

    Every status change goes through ``_apply_transition``, a conditional
    UPDATE on (pk, expected status): of two concurrent transitions from the
    same status exactly one matches a row, the other gets
    InvalidTransitionError. Nothing else in the project writes order status.

    Realtime notification happens after the status change is committed and is
    best-effort: a notifier failure is logged and never undoes the change.
    """

    VALID_STATUS_TRANSITIONS = VALID_STATUS_TRANSITIONS

    def __init__(self, notifier):
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, lines, tenant, table=None, tip_rate_bps=None, notes=None):
        """
        Price ``lines`` and persist a NEW order with its lines, all or nothing.

        Args:
            lines: list of ``orders.calculators.CartLine``
            tenant: the restaurant; supplies the tax rate and default tip
            table: optional Table for table service
            tip_rate_bps: customer's tip choice, tenant default when None

        Raises:
            InvalidCartError: the calculator rejected the cart
            PersistenceError: the order could not be stored
        """
        if tip_rate_bps is None:
            tip_rate_bps = tenant.default_tip_bps

        breakdown = compute_totals(lines, tenant.tax_rate_bps, tip_rate_bps)

        try:
            with transaction.atomic():
                order = Order.all_objects.create(
                    tenant=tenant,
                    table=table,
                    status=Order.Status.NEW,
                    subtotal_cents=breakdown.subtotal_cents,
                    tax_cents=breakdown.tax_cents,
                    tip_cents=breakdown.tip_cents,
                    total_cents=breakdown.total_cents,
                    notes=notes or None,
                )
                OrderLine.objects.bulk_create([
                    OrderLine(
                        order=order,
                        menu_item_id=line.menu_item_id,
                        name=line.name,
                        quantity=line.quantity,
                        unit_price_cents=line.unit_price_cents,
                        selected_modifiers=[m.as_dict() for m in line.modifiers],
                        notes=line.notes,
                        position=position,
                    )
                    for position, line in enumerate(lines)
                ])
        except DatabaseError as e:
            logger.error(f"Failed to persist order for tenant {tenant.slug}: {e}", exc_info=True)
            raise PersistenceError(f"Could not save order: {e}") from e

        logger.info(
            f"Created order {order.code} ({order.id}) for tenant {tenant.slug}: "
            f"{len(lines)} lines, total {order.total_cents}"
        )
        return order

    def attach_payment_session(self, order, session_id):
        """Record the Checkout Session id on a NEW order. Set once, never changed."""
        try:
            updated = Order.all_objects.filter(
                pk=order.pk, stripe_session_id__isnull=True
            ).update(stripe_session_id=session_id, updated_at=timezone.now())
        except DatabaseError as e:
            logger.error(f"Failed to store session {session_id} on order {order.id}: {e}", exc_info=True)
            raise PersistenceError(f"Could not save payment session: {e}") from e

        if not updated:
            raise PersistenceError(f"Order {order.id} already has a payment session")

        order.stripe_session_id = session_id
        logger.info(f"Attached payment session {session_id} to order {order.code}")
        return order

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def get_order(order_id, tenant):
        """
        Load an order within the caller's tenant.

        Orders of other tenants are reported as missing, never as forbidden.
        """
        try:
            return Order.all_objects.select_related('tenant', 'table').get(pk=order_id, tenant=tenant)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise NotFoundError(f"Order {order_id} not found")

    @staticmethod
    def get_order_by_session(session_id):
        try:
            return Order.all_objects.select_related('tenant', 'table').get(stripe_session_id=session_id)
        except Order.DoesNotExist:
            raise NotFoundError(f"No order for payment session {session_id}")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def transition(self, order_id, target_status, tenant):
        """
        Move an order of ``tenant`` to ``target_status``.

        Raises:
            NotFoundError: no such order for this tenant
            InvalidTransitionError: not allowed from the current status, or
                another writer changed the status first
        """
        order = self.get_order(order_id, tenant)
        return self._apply_transition(order, target_status)

    def mark_paid(self, session_id, captured_amount_cents, account_id=None):
        """
        Record a completed payment for the order owning ``session_id``.

        Idempotent: an order already past NEW is returned unchanged. The
        captured amount is trusted as the order total; the stored breakdown
        is left as computed and a mismatch is logged for reconciliation.

        Args:
            account_id: connected account the payment event came from; when
                given it must be the order tenant's account

        Raises:
            NotFoundError: unknown session
            TenantMismatchError: session belongs to another tenant's account
            InvalidTransitionError: the order was canceled before payment
        """
        order = self.get_order_by_session(session_id)

        if account_id is not None and order.tenant.stripe_account_id != account_id:
            logger.error(
                f"Payment for session {session_id} came from account {account_id}, "
                f"but order {order.id} belongs to tenant {order.tenant.slug}"
            )
            raise TenantMismatchError(
                f"Session {session_id} does not belong to account {account_id}"
            )

        if order.status not in (Order.Status.NEW, Order.Status.CANCELED):
            logger.info(f"Order {order.code} already {order.status}; payment for {session_id} is a no-op")
            return order

        extra_fields = {"paid_at": timezone.now()}
        if captured_amount_cents is not None and captured_amount_cents != order.total_cents:
            logger.warning(
                f"Reconciliation: order {order.code} ({order.id}) computed total "
                f"{order.total_cents} but captured {captured_amount_cents}; "
                f"recording captured amount as total"
            )
            extra_fields["total_cents"] = captured_amount_cents

        try:
            order = self._apply_transition(order, Order.Status.PAID, **extra_fields)
        except InvalidTransitionError:
            # Lost a race with a duplicate delivery of the same payment
            current = self.get_order_by_session(session_id)
            if current.status not in (Order.Status.NEW, Order.Status.CANCELED):
                logger.info(f"Order {current.code} was marked {current.status} concurrently")
                return current
            raise

        logger.info(f"Order {order.code} marked PAID via session {session_id}")
        return order

    def cancel_unpaid(self, session_id):
        """
        Cancel the order of an expired payment session if it is still NEW.
        Any other status is left alone, so a late expiry never undoes a payment.

        Raises:
            NotFoundError: unknown session
        """
        order = self.get_order_by_session(session_id)

        if order.status != Order.Status.NEW:
            logger.info(f"Session {session_id} expired; order {order.code} is {order.status}, nothing to do")
            return order

        try:
            return self._apply_transition(order, Order.Status.CANCELED)
        except InvalidTransitionError:
            current = self.get_order_by_session(session_id)
            logger.info(f"Order {current.code} moved to {current.status} before expiry could cancel it")
            return current

    def cancel_abandoned(self, older_than_minutes, dry_run=False):
        """
        Cancel NEW orders that never got a payment session and are older than
        ``older_than_minutes``. Returns the list of affected order ids.
        """
        cutoff = timezone.now() - timedelta(minutes=older_than_minutes)
        candidates = list(
            Order.all_objects.filter(
                status=Order.Status.NEW,
                stripe_session_id__isnull=True,
                created_at__lt=cutoff,
            ).select_related('tenant')
        )

        if dry_run:
            return [order.id for order in candidates]

        canceled = []
        for order in candidates:
            try:
                self._apply_transition(order, Order.Status.CANCELED)
            except InvalidTransitionError:
                logger.info(f"Abandoned order {order.code} changed status concurrently; skipped")
                continue
            canceled.append(order.id)
        return canceled

    def _apply_transition(self, order, target_status, **extra_fields):
        current_status = order.status
        allowed = self.VALID_STATUS_TRANSITIONS.get(current_status, [])

        if target_status not in allowed:
            raise InvalidTransitionError(current_status, target_status, allowed)

        now = timezone.now()
        try:
            updated = Order.all_objects.filter(pk=order.pk, status=current_status).update(
                status=target_status, updated_at=now, **extra_fields
            )
        except DatabaseError as e:
            logger.error(f"Failed to update order {order.id} status: {e}", exc_info=True)
            raise PersistenceError(f"Could not update order status: {e}") from e

        if not updated:
            # Another writer changed the status after we read it
            actual = (
                Order.all_objects.filter(pk=order.pk).values_list('status', flat=True).first()
            )
            logger.warning(
                f"Concurrent update on order {order.id}: expected {current_status}, "
                f"found {actual}; {target_status} rejected"
            )
            raise InvalidTransitionError(
                actual,
                target_status,
                self.VALID_STATUS_TRANSITIONS.get(actual, []),
                message=(
                    f"Order {order.code} changed from {current_status} to {actual} "
                    f"before it could be moved to {target_status}."
                ),
            )

        order.status = target_status
        order.updated_at = now
        for field, value in extra_fields.items():
            setattr(order, field, value)

        logger.info(f"Order {order.code} ({order.id}) status transition {current_status} -> {target_status}")
        self._notify(order)
        return order

    def _notify(self, order):
        """Publish the committed order snapshot; failures are logged, never raised."""
        order_id = order.pk

        def send():
            try:
                fresh = Order.all_objects.select_related('table').prefetch_related('lines').get(pk=order_id)
                self.notifier.publish(order_snapshot(fresh))
            except Exception as e:
                logger.warning(f"Realtime notification for order {order_id} failed: {e}")

        # Ensure the status change is committed before broadcasting
        transaction.on_commit(send)
