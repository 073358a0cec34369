"""
Abandoned-order cleanup through the Celery task and the management command.
"""
from datetime import timedelta
from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.utils import timezone

from orders.models import Order
from orders.tasks import cancel_abandoned_orders


@pytest.fixture
def abandoned_order(lifecycle, tenant_a, scenario_a_lines):
    order = lifecycle.create(scenario_a_lines, tenant_a)
    Order.all_objects.filter(pk=order.pk).update(created_at=timezone.now() - timedelta(hours=3))
    return order


@pytest.fixture
def use_test_lifecycle(lifecycle):
    with mock.patch('orders.factories.get_lifecycle_service', return_value=lifecycle):
        yield lifecycle


@pytest.mark.django_db
class TestCancelAbandonedTask:
    def test_cancels_abandoned_orders(self, use_test_lifecycle, abandoned_order, settings):
        settings.ABANDONED_ORDER_MINUTES = 60

        message = cancel_abandoned_orders()

        assert message == "Canceled 1 abandoned orders older than 60 minutes"
        assert Order.all_objects.get(pk=abandoned_order.pk).status == Order.Status.CANCELED

    def test_nothing_to_do(self, use_test_lifecycle, new_order_a):
        assert cancel_abandoned_orders() == "No abandoned orders to cancel"
        assert Order.all_objects.get(pk=new_order_a.pk).status == Order.Status.NEW

    def test_explicit_age(self, use_test_lifecycle, abandoned_order):
        assert cancel_abandoned_orders(older_than_minutes=600) == "No abandoned orders to cancel"


@pytest.mark.django_db
class TestCancelAbandonedCommand:
    def test_dry_run(self, abandoned_order):
        out = StringIO()
        call_command('cancel_abandoned_orders', '--dry-run', stdout=out)

        output = out.getvalue()
        assert 'DRY RUN' in output
        assert str(abandoned_order.id) in output
        assert 'Would cancel 1' in output
        assert Order.all_objects.get(pk=abandoned_order.pk).status == Order.Status.NEW

    def test_cancels(self, abandoned_order):
        out = StringIO()
        call_command('cancel_abandoned_orders', '--minutes', '30', stdout=out)

        assert 'Canceled 1' in out.getvalue()
        assert Order.all_objects.get(pk=abandoned_order.pk).status == Order.Status.CANCELED
