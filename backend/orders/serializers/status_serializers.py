from rest_framework import serializers

from orders.models import Order


class OrderTransitionSerializer(serializers.Serializer):
    """
    Validates the requested target status. Whether the transition is legal
    from the current status is decided by OrderLifecycleService.
    """

    status = serializers.ChoiceField(choices=Order.Status.choices)
