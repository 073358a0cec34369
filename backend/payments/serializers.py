from rest_framework import serializers

from .money import MAX_BPS


class CheckoutLineSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=99)
    modifier_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), required=False, default=list
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)


class CheckoutRequestSerializer(serializers.Serializer):
    """
    Customer cart submitted at checkout. Only ids and quantities are read;
    prices always come from the menu.
    """

    restaurant = serializers.SlugField(required=False)
    table = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    items = CheckoutLineSerializer(many=True)
    tip_rate_bps = serializers.IntegerField(
        required=False, allow_null=True, min_value=0, max_value=MAX_BPS
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("Cart is empty.")
        return value

    def validate(self, attrs):
        # Customer pages may identify the restaurant with the X-Tenant header instead
        request = self.context.get('request')
        tenant = getattr(request, 'tenant', None) if request is not None else None
        if not attrs.get('restaurant'):
            if tenant is None:
                raise serializers.ValidationError({'restaurant': "This field is required."})
            attrs['restaurant'] = tenant.slug
        elif tenant is not None and tenant.slug != attrs['restaurant']:
            raise serializers.ValidationError({'restaurant': "Does not match the X-Tenant header."})
        return attrs


class CheckoutResponseSerializer(serializers.Serializer):
    url = serializers.URLField()
    order_id = serializers.UUIDField()
