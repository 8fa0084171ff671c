"""
Tires — Serializers

@file tires/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import TireMovement, TireStock

__all__ = [
    'TireStockReadSerializer',
    'TireStockWriteSerializer',
    'TireStockUpdateSerializer',
    'TireStockAdjustSerializer',
    'TireMountSerializer',
    'TireMovementReadSerializer',
]


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------

class TireStockReadSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)

    class Meta:
        model = TireStock
        fields = [
            'id', 'organization', 'brand', 'model', 'dimension', 'dot_code',
            'label', 'quantity', 'location', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class TireStockWriteSerializer(serializers.Serializer):
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    model = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    dimension = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    dot_code = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    quantity = serializers.IntegerField(min_value=0, default=0)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class TireStockUpdateSerializer(serializers.Serializer):
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    model = serializers.CharField(max_length=100, required=False, allow_blank=True)
    dimension = serializers.CharField(max_length=50, required=False, allow_blank=True)
    dot_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


# ---------------------------------------------------------------------------
# Movements
# ---------------------------------------------------------------------------

class TireStockAdjustSerializer(serializers.Serializer):
    movement_type = serializers.ChoiceField(
        choices=[TireMovement.MovementType.INTRARE, TireMovement.MovementType.IESIRE],
    )
    quantity = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class TireMountSerializer(serializers.Serializer):
    """Shared by mount and unmount; the vehicle comes from the URL."""

    stock_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    date = serializers.DateField()
    odometer_km = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True,
    )
    driver_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class TireMovementReadSerializer(serializers.ModelSerializer):
    movement_type_display = serializers.CharField(
        source='get_movement_type_display', read_only=True,
    )
    stock_id = serializers.UUIDField(read_only=True)
    brand = serializers.CharField(source='stock.brand', read_only=True)
    model = serializers.CharField(source='stock.model', read_only=True)
    dimension = serializers.CharField(source='stock.dimension', read_only=True)
    dot_code = serializers.CharField(source='stock.dot_code', read_only=True)
    vehicle_id = serializers.UUIDField(read_only=True, allow_null=True)
    vehicle_license_plate = serializers.CharField(
        source='vehicle.license_plate', read_only=True, default=None,
    )
    vehicle_name = serializers.CharField(
        source='vehicle.display_name', read_only=True, default=None,
    )
    user_name = serializers.CharField(
        source='created_by.get_username', read_only=True, default=None,
    )

    class Meta:
        model = TireMovement
        fields = [
            'id', 'stock_id', 'brand', 'model', 'dimension', 'dot_code',
            'movement_type', 'movement_type_display',
            'date', 'quantity', 'odometer_km', 'driver_name', 'notes',
            'vehicle_id', 'vehicle_license_plate', 'vehicle_name',
            'user_name', 'created_at',
        ]
        read_only_fields = fields
