"""
ChannelsOrderNotifier publishing to the channel layer.
"""
from unittest import mock

import pytest
from asgiref.sync import async_to_sync
from channels.layers import InMemoryChannelLayer

from notifications.services import (
    ChannelsOrderNotifier,
    NotificationError,
    board_group_name,
)
from orders.serializers import order_snapshot


def test_group_name_is_per_tenant():
    assert board_group_name('abc') == 'tenant_abc_orders'


class TestChannelsOrderNotifier:
    def test_publishes_to_tenant_group(self):
        layer = InMemoryChannelLayer()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)('tenant_t1_orders', channel)

        ChannelsOrderNotifier(channel_layer=layer).publish({'id': 'o1', 'tenant_id': 't1', 'status': 'PAID'})

        message = async_to_sync(layer.receive)(channel)
        assert message == {
            'type': 'order_update',
            'order': {'id': 'o1', 'tenant_id': 't1', 'status': 'PAID'},
        }

    def test_missing_channel_layer(self):
        with mock.patch('notifications.services.get_channel_layer', return_value=None):
            with pytest.raises(NotificationError):
                ChannelsOrderNotifier().publish({'id': 'o1', 'tenant_id': 't1', 'status': 'PAID'})

    @pytest.mark.django_db
    def test_order_snapshot_is_serializable_for_the_layer(self, new_order_a):
        layer = InMemoryChannelLayer()
        channel = async_to_sync(layer.new_channel)()
        group = board_group_name(new_order_a.tenant_id)
        async_to_sync(layer.group_add)(group, channel)

        ChannelsOrderNotifier(channel_layer=layer).publish(order_snapshot(new_order_a))

        message = async_to_sync(layer.receive)(channel)
        assert message['order']['code'] == new_order_a.code
        assert message['order']['status'] == 'NEW'
