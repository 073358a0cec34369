"""
Process-wide default collaborators for checkout.

Built from Django settings on first use and cached for the life of the
process. Tests construct ``CheckoutService`` directly with fakes, or patch
``get_checkout_service``.
"""
from functools import lru_cache

from django.conf import settings

from menu.services import MenuService
from orders.factories import get_lifecycle_service

from .services import CheckoutService
from .strategies import StripeCheckoutGateway


@lru_cache(maxsize=None)
def get_payment_gateway():
    return StripeCheckoutGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        api_version=settings.STRIPE_API_VERSION,
        timeout_seconds=settings.STRIPE_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=None)
def get_checkout_service():
    return CheckoutService(
        lifecycle=get_lifecycle_service(),
        gateway=get_payment_gateway(),
        menu=MenuService,
    )
