"""
POST /api/payments/webhooks/stripe/
"""
from unittest import mock

import pytest
import stripe

from orders.models import Order

pytestmark = [pytest.mark.django_db, pytest.mark.api]

URL = '/api/payments/webhooks/stripe/'


@pytest.fixture(autouse=True)
def checkout_service(lifecycle):
    from menu.services import MenuService
    from payments.services import CheckoutService
    from core_backend.tests.fixtures import FakePaymentGateway

    service = CheckoutService(lifecycle=lifecycle, gateway=FakePaymentGateway(), menu=MenuService)
    with mock.patch('payments.views.webhooks.get_checkout_service', return_value=service):
        yield service


def deliver(client, event):
    with mock.patch('payments.views.webhooks.stripe.Webhook.construct_event', return_value=event):
        return client.post(URL, data=b'{}', content_type='application/json', HTTP_STRIPE_SIGNATURE='t=1,v1=abc')


def session_event(event_type, session_id='cs_test_a', account='acct_pizza', **session):
    return {
        'id': 'evt_1',
        'type': event_type,
        'account': account,
        'data': {'object': {'id': session_id, **session}},
    }


class TestStripeWebhook:
    def test_completed_marks_paid(self, api_client, session_order_a):
        response = deliver(api_client, session_event(
            'checkout.session.completed', payment_status='paid', amount_total=3334
        ))

        assert response.status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.PAID

    def test_redelivery_is_ok(self, api_client, session_order_a):
        event = session_event('checkout.session.completed', payment_status='paid', amount_total=3334)

        assert deliver(api_client, event).status_code == 200
        assert deliver(api_client, event).status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.PAID

    def test_expired_cancels(self, api_client, session_order_a):
        response = deliver(api_client, session_event('checkout.session.expired'))

        assert response.status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.CANCELED

    def test_expired_after_paid_keeps_paid(self, api_client, lifecycle, session_order_a):
        lifecycle.mark_paid('cs_test_a', 3334)

        response = deliver(api_client, session_event('checkout.session.expired'))

        assert response.status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.PAID

    def test_unknown_event_is_acknowledged(self, api_client):
        response = deliver(api_client, {'id': 'evt_2', 'type': 'customer.created', 'data': {'object': {}}})
        assert response.status_code == 200

    def test_unknown_session_is_acknowledged(self, api_client, session_order_a):
        response = deliver(api_client, session_event(
            'checkout.session.completed', session_id='cs_other', payment_status='paid', amount_total=100
        ))
        assert response.status_code == 200

    def test_wrong_account_does_not_pay(self, api_client, session_order_a):
        response = deliver(api_client, session_event(
            'checkout.session.completed', account='acct_burger', payment_status='paid', amount_total=3334
        ))

        assert response.status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.NEW

    def test_persistence_failure_asks_for_redelivery(self, api_client, checkout_service, session_order_a):
        from core_backend.exceptions import PersistenceError

        with mock.patch.object(checkout_service.lifecycle, 'mark_paid', side_effect=PersistenceError('db down')):
            response = deliver(api_client, session_event(
                'checkout.session.completed', payment_status='paid', amount_total=3334
            ))

        assert response.status_code == 503

    def test_bad_signature(self, api_client, session_order_a):
        error = stripe.SignatureVerificationError('No signatures found', 't=1,v1=abc')
        with mock.patch('payments.views.webhooks.stripe.Webhook.construct_event', side_effect=error):
            response = api_client.post(URL, data=b'{}', content_type='application/json',
                                       HTTP_STRIPE_SIGNATURE='t=1,v1=abc')

        assert response.status_code == 400
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.NEW

    def test_invalid_payload(self, api_client):
        with mock.patch('payments.views.webhooks.stripe.Webhook.construct_event', side_effect=ValueError('bad json')):
            response = api_client.post(URL, data=b'not json', content_type='application/json')

        assert response.status_code == 400

    def test_real_signature_verification(self, api_client, session_order_a, settings):
        """Signed with the real Stripe helper to check the view wiring end to end."""
        import json
        import time

        settings.STRIPE_WEBHOOK_SECRET = 'whsec_test'
        payload = json.dumps(session_event(
            'checkout.session.completed', payment_status='paid', amount_total=3334
        ))
        timestamp = int(time.time())
        signature = stripe.WebhookSignature._compute_signature(f'{timestamp}.{payload}', 'whsec_test')

        response = api_client.post(
            URL, data=payload, content_type='application/json',
            HTTP_STRIPE_SIGNATURE=f't={timestamp},v1={signature}',
        )

        assert response.status_code == 200
        assert Order.all_objects.get(pk=session_order_a.pk).status == Order.Status.PAID
