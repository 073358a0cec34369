from celery import shared_task
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


@shared_task
def cancel_abandoned_orders(older_than_minutes=None):
    """
    Cancel NEW orders that never received a payment session.

    This task runs every 15 minutes via Celery Beat. Such orders are left
    behind when the payment provider could not create a session.

    Returns:
        str: Status message with count of canceled orders
    """
    from .factories import get_lifecycle_service

    minutes = older_than_minutes or settings.ABANDONED_ORDER_MINUTES

    try:
        canceled = get_lifecycle_service().cancel_abandoned(minutes)

        if not canceled:
            logger.info("No abandoned orders to cancel")
            return "No abandoned orders to cancel"

        message = f"Canceled {len(canceled)} abandoned orders older than {minutes} minutes"
        logger.info(message)
        return message

    except Exception as e:
        error_msg = f"Error canceling abandoned orders: {e}"
        logger.error(error_msg, exc_info=True)
        raise
