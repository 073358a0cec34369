"""
Webhook views for payment providers.

Stripe calls this endpoint for Connect events of every restaurant account.
The signature is verified here; everything after that is
``CheckoutService.handle_payment_notification``.
"""
import logging

import stripe
from django.conf import settings
from django.http import HttpResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core_backend.exceptions import OrderingError

from ..events import event_field, parse_event
from ..factories import get_checkout_service

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class StripeWebhookView(APIView):
    """
    Responds 200 once an event has been handled or deliberately ignored,
    400 for unverifiable payloads, and 5xx when the order could not be
    updated so Stripe redelivers.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
        endpoint_secret = settings.STRIPE_WEBHOOK_SECRET

        try:
            event = stripe.Webhook.construct_event(payload, sig_header, endpoint_secret)
        except ValueError as e:
            # Invalid payload
            logger.error(f"Stripe webhook: Invalid payload - {e}")
            return HttpResponse(status=400)
        except stripe.SignatureVerificationError as e:
            # Invalid signature
            logger.error(f"Stripe webhook: Invalid signature - {e}")
            return HttpResponse(status=400)

        logger.info(f"Stripe webhook: received {event['type']} ({event_field(event, 'id')}) for account {event_field(event, 'account')}")

        try:
            get_checkout_service().handle_payment_notification(parse_event(event))
        except OrderingError as e:
            logger.error(f"Stripe webhook: failed to handle {event_field(event, 'id')}: {e}", exc_info=True)
            return HttpResponse(status=e.status_code if e.is_server_error else 500)

        return HttpResponse(status=200)
