from rest_framework import serializers

from .models import MenuItem, Modifier


class ModifierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Modifier
        fields = ['id', 'name', 'type', 'price_delta_cents', 'is_required']


class MenuItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    modifiers = ModifierSerializer(many=True, read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'category', 'category_name', 'name', 'description',
            'price_cents', 'is_available', 'sort_order', 'modifiers',
        ]
        select_related_fields = ['category']
        prefetch_related_fields = ['modifiers']


class AvailabilitySerializer(serializers.Serializer):
    is_available = serializers.BooleanField()
