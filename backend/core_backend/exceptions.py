"""
Domain error taxonomy for ordering and checkout.

Every error carries a machine-readable ``kind`` and the HTTP status it maps
to. Service code raises these; ``api_exception_handler`` renders them for DRF
views so no view has to catch and rewrap them.
"""
import logging

from django_ratelimit.exceptions import Ratelimited
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class OrderingError(Exception):
    """Base class for all ordering/checkout domain errors."""

    kind = "ordering_error"
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "The request could not be processed."

    def __init__(self, message=None, **details):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details

    @property
    def is_server_error(self):
        return self.status_code >= 500

    def to_payload(self):
        """Render the error body. Server-side failures never expose internal detail."""
        if self.is_server_error:
            return {"kind": self.kind, "message": self.public_message}
        return {"kind": self.kind, "message": self.message}


# --- Validation errors (recoverable by the caller) ---

class InvalidCartError(OrderingError):
    kind = "invalid_cart"
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "The cart is invalid."


class ItemUnavailableError(OrderingError):
    kind = "item_unavailable"
    status_code = status.HTTP_409_CONFLICT
    public_message = "Some items are no longer available."


class InvalidTransitionError(OrderingError):
    kind = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT
    public_message = "The order cannot move to the requested status."

    def __init__(self, current_status, target_status, allowed=(), message=None):
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = list(allowed)
        super().__init__(
            message
            or f"Cannot transition order from {current_status} to {target_status}. "
            f"Allowed: {', '.join(self.allowed) or 'none'}"
        )

    def to_payload(self):
        payload = super().to_payload()
        payload["current_status"] = self.current_status
        payload["target_status"] = self.target_status
        payload["allowed"] = self.allowed
        return payload


# --- Lookup / authorization errors ---

class TenantNotFoundError(OrderingError):
    kind = "tenant_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Restaurant not found."


class TableNotFoundError(OrderingError):
    kind = "table_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Table not found."


class NotFoundError(OrderingError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Order not found."


class TenantMismatchError(OrderingError):
    kind = "tenant_mismatch"
    status_code = status.HTTP_403_FORBIDDEN
    public_message = "The payment does not belong to this restaurant."


class PaymentsNotConfiguredError(OrderingError):
    kind = "payments_not_configured"
    status_code = status.HTTP_409_CONFLICT
    public_message = "Restaurant is not accepting orders."


# --- Infrastructure failures (transient, 5xx) ---

class PaymentSessionError(OrderingError):
    kind = "payment_session_failed"
    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = "Payment could not be started. Please try again."


class PersistenceError(OrderingError):
    kind = "persistence_failed"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    public_message = "The service is temporarily unavailable. Please try again."


def api_exception_handler(exc, context):
    """
    DRF exception handler that renders OrderingError subclasses as
    ``{"error": {"kind": ..., "message": ...}}`` and defers everything else
    to the framework default.
    """
    if isinstance(exc, OrderingError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view else "unknown"
        if exc.is_server_error:
            logger.error(f"{view_name}: {exc.kind}: {exc.message}")
        else:
            logger.info(f"{view_name}: {exc.kind}: {exc.message}")
        return Response({"error": exc.to_payload()}, status=exc.status_code)

    if isinstance(exc, Ratelimited):
        logger.warning(f"Rate limit exceeded on {context.get('view').__class__.__name__}")
        return Response(
            {"error": {"kind": "rate_limited", "message": "Too many requests. Please slow down."}},
            status=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    return exception_handler(exc, context)
