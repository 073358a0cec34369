from rest_framework import serializers

from orders.models import VALID_STATUS_TRANSITIONS, Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    line_total_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            'id', 'menu_item', 'name', 'quantity', 'unit_price_cents',
            'selected_modifiers', 'notes', 'line_total_cents',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Staff view of an order. Also the snapshot broadcast to the order board.
    """

    tenant_id = serializers.UUIDField(read_only=True)
    table_label = serializers.CharField(source='table.label', read_only=True, default=None)
    lines = OrderLineSerializer(many=True, read_only=True)
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'tenant_id', 'code', 'status', 'allowed_transitions', 'table_label',
            'subtotal_cents', 'tax_cents', 'tip_cents', 'total_cents',
            'notes', 'lines', 'paid_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields
        select_related_fields = ['table']
        prefetch_related_fields = ['lines']

    def get_allowed_transitions(self, obj):
        return list(VALID_STATUS_TRANSITIONS.get(obj.status, []))


class OrderTrackingSerializer(serializers.ModelSerializer):
    """Customer-safe order status page."""

    restaurant_name = serializers.CharField(source='tenant.name', read_only=True)
    currency = serializers.CharField(source='tenant.currency', read_only=True)
    table_label = serializers.CharField(source='table.label', read_only=True, default=None)
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'code', 'status', 'restaurant_name', 'currency', 'table_label',
            'subtotal_cents', 'tax_cents', 'tip_cents', 'total_cents',
            'lines', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


def order_snapshot(order):
    """JSON-ready dict of an order for realtime broadcast."""
    return dict(OrderSerializer(order).data)
