from rest_framework import serializers

from .models import Table, Tenant


class TenantPublicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ['slug', 'name', 'currency', 'tax_rate_bps', 'default_tip_bps', 'service_type']


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'label', 'code', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_code(self, value):
        tenant = self.context['request'].tenant
        queryset = Table.all_objects.filter(tenant=tenant, code=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A table with this code already exists.")
        return value

    def create(self, validated_data):
        validated_data['tenant'] = self.context['request'].tenant
        return super().create(validated_data)


class TablePublicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['label', 'code']
