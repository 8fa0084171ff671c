"""
Oil — Serializers

Read serializers flatten stock and vehicle labels into each movement;
write serializers only validate shape and range before the service layer
takes over.

@file oil/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import OilMovement, OilStock

__all__ = [
    'OilStockReadSerializer',
    'OilStockWriteSerializer',
    'OilStockUpdateSerializer',
    'OilStockAdjustSerializer',
    'OilUsageSerializer',
    'OilMovementReadSerializer',
]

POSITIVE_LITERS = {'max_digits': 10, 'decimal_places': 2, 'min_value': Decimal('0.01')}


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------

class OilStockReadSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)

    class Meta:
        model = OilStock
        fields = [
            'id', 'organization', 'oil_type', 'brand', 'label',
            'quantity', 'location', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OilStockWriteSerializer(serializers.Serializer):
    oil_type = serializers.CharField(max_length=100)
    brand = serializers.CharField(max_length=100)
    quantity = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), default=Decimal('0'),
    )
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class OilStockUpdateSerializer(serializers.Serializer):
    oil_type = serializers.CharField(max_length=100, required=False)
    brand = serializers.CharField(max_length=100, required=False)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


# ---------------------------------------------------------------------------
# Movements
# ---------------------------------------------------------------------------

class OilStockAdjustSerializer(serializers.Serializer):
    movement_type = serializers.ChoiceField(
        choices=[OilMovement.MovementType.INTRARE, OilMovement.MovementType.IESIRE],
    )
    quantity = serializers.DecimalField(**POSITIVE_LITERS)
    date = serializers.DateField()
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class OilUsageSerializer(serializers.Serializer):
    stock_id = serializers.UUIDField()
    vehicle_id = serializers.UUIDField()
    service_event_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(**POSITIVE_LITERS)
    date = serializers.DateField()
    odometer_km = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True,
    )
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class OilMovementReadSerializer(serializers.ModelSerializer):
    movement_type_display = serializers.CharField(
        source='get_movement_type_display', read_only=True,
    )
    stock_id = serializers.UUIDField(read_only=True)
    oil_type = serializers.CharField(source='stock.oil_type', read_only=True)
    brand = serializers.CharField(source='stock.brand', read_only=True)
    vehicle_id = serializers.UUIDField(read_only=True, allow_null=True)
    vehicle_license_plate = serializers.CharField(
        source='vehicle.license_plate', read_only=True, default=None,
    )
    vehicle_name = serializers.CharField(
        source='vehicle.display_name', read_only=True, default=None,
    )
    service_event_id = serializers.UUIDField(read_only=True, allow_null=True)
    user_name = serializers.CharField(
        source='created_by.get_username', read_only=True, default=None,
    )

    class Meta:
        model = OilMovement
        fields = [
            'id', 'stock_id', 'oil_type', 'brand',
            'movement_type', 'movement_type_display',
            'date', 'quantity', 'odometer_km', 'notes',
            'vehicle_id', 'vehicle_license_plate', 'vehicle_name',
            'service_event_id', 'user_name', 'created_at',
        ]
        read_only_fields = fields
