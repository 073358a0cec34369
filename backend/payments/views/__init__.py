from .checkout import CheckoutView
from .webhooks import StripeWebhookView

__all__ = ["CheckoutView", "StripeWebhookView"]
