"""
StripeCheckoutGateway request building. The Stripe client is mocked; no
network calls are made.
"""
from types import SimpleNamespace
from unittest import mock

import pytest
import stripe

from core_backend.exceptions import PaymentSessionError
from payments.strategies import PaymentSession, SessionLineItem, StripeCheckoutGateway


@pytest.fixture
def client():
    client = mock.Mock()
    client.checkout.sessions.create.return_value = SimpleNamespace(
        id='cs_live_1', url='https://checkout.stripe.com/c/pay/cs_live_1'
    )
    return client


@pytest.fixture
def gateway(client):
    return StripeCheckoutGateway(api_key='sk_test_x', client=client)


def create(gateway, **overrides):
    kwargs = dict(
        account_id='acct_pizza',
        line_items=[
            SessionLineItem(name='Margherita', unit_amount_cents=1499, quantity=2, description='Crust'),
            SessionLineItem(name='Tax', unit_amount_cents=262, quantity=1),
        ],
        success_url='https://app.test/order/1?success=true',
        cancel_url='https://app.test/r/pizza-place?canceled=true',
        metadata={'order_id': 'order-1', 'tenant_id': 'tenant-1'},
        currency='USD',
    )
    kwargs.update(overrides)
    return gateway.create_session(**kwargs)


class TestStripeCheckoutGateway:
    def test_returns_session(self, gateway):
        assert create(gateway) == PaymentSession(
            session_id='cs_live_1', redirect_url='https://checkout.stripe.com/c/pay/cs_live_1'
        )

    def test_session_is_created_on_connected_account(self, gateway, client):
        create(gateway)

        options = client.checkout.sessions.create.call_args.kwargs['options']
        assert options == {'stripe_account': 'acct_pizza', 'idempotency_key': 'checkout-order-1'}

    def test_line_items(self, gateway, client):
        create(gateway)

        params = client.checkout.sessions.create.call_args.kwargs['params']
        assert params['mode'] == 'payment'
        assert params['line_items'] == [
            {
                'price_data': {
                    'currency': 'usd',
                    'product_data': {'name': 'Margherita', 'description': 'Crust'},
                    'unit_amount': 1499,
                },
                'quantity': 2,
            },
            {
                'price_data': {
                    'currency': 'usd',
                    'product_data': {'name': 'Tax'},
                    'unit_amount': 262,
                },
                'quantity': 1,
            },
        ]
        assert params['metadata'] == {'order_id': 'order-1', 'tenant_id': 'tenant-1'}
        assert params['success_url'] == 'https://app.test/order/1?success=true'
        assert params['cancel_url'] == 'https://app.test/r/pizza-place?canceled=true'

    def test_no_application_fee_by_default(self, gateway, client):
        create(gateway)

        params = client.checkout.sessions.create.call_args.kwargs['params']
        assert 'application_fee_amount' not in params['payment_intent_data']

    def test_application_fee(self, gateway, client):
        create(gateway, application_fee_cents=127)

        params = client.checkout.sessions.create.call_args.kwargs['params']
        assert params['payment_intent_data']['application_fee_amount'] == 127

    def test_long_description_is_truncated(self, gateway, client):
        create(gateway, line_items=[
            SessionLineItem(name='Pizza', unit_amount_cents=100, quantity=1, description='x' * 800)
        ])

        params = client.checkout.sessions.create.call_args.kwargs['params']
        assert len(params['line_items'][0]['price_data']['product_data']['description']) == 500

    @pytest.mark.parametrize('error', [
        stripe.APIConnectionError('Request timed out'),
        stripe.InvalidRequestError('No such account', param='stripe_account'),
        stripe.AuthenticationError('Invalid API key'),
    ])
    def test_stripe_errors_become_payment_session_errors(self, gateway, client, error):
        client.checkout.sessions.create.side_effect = error

        with pytest.raises(PaymentSessionError) as exc_info:
            create(gateway)

        assert exc_info.value.to_payload() == {
            'kind': 'payment_session_failed',
            'message': 'Payment could not be started. Please try again.',
        }

    def test_builds_client_with_timeout(self):
        with mock.patch('payments.strategies.stripe.StripeClient') as client_cls, \
                mock.patch('payments.strategies.stripe.RequestsClient') as http_client_cls:
            StripeCheckoutGateway(api_key='sk_test_x', api_version='2024-06-20', timeout_seconds=7)

        http_client_cls.assert_called_once_with(timeout=7)
        client_cls.assert_called_once_with(
            'sk_test_x',
            stripe_version='2024-06-20',
            http_client=http_client_cls.return_value,
            max_network_retries=0,
        )
