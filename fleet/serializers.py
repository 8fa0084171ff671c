"""
Fleet — Serializers

@file fleet/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import OdometerLog, ServiceEvent, Vehicle
from .status import (
    compute_copie_conforma_status,
    compute_insurance_status,
    compute_tachograph_status,
    should_trigger_tachograph_reminder,
)

KILOMETERS = dict(max_digits=12, decimal_places=2)


class ServiceEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceEvent
        fields = [
            'id', 'event_type', 'date', 'odometer_km',
            'next_due_km', 'next_due_date', 'notes', 'created_at',
        ]
        read_only_fields = fields


class ServiceEventCreateSerializer(serializers.Serializer):
    """The vehicle comes from the URL."""

    event_type = serializers.ChoiceField(choices=ServiceEvent.EventType.choices)
    date = serializers.DateField()
    odometer_km = serializers.DecimalField(
        **KILOMETERS, min_value=Decimal('0'), required=False, allow_null=True,
    )
    next_due_km = serializers.DecimalField(
        **KILOMETERS, min_value=Decimal('0.01'), required=False, allow_null=True,
    )
    next_due_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, allow_null=True)


class OdometerLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = OdometerLog
        fields = ['id', 'date', 'value_km', 'source', 'created_at']
        read_only_fields = fields


class OdometerLogCreateSerializer(serializers.Serializer):
    date = serializers.DateField()
    value_km = serializers.DecimalField(**KILOMETERS, min_value=Decimal('0'))
    source = serializers.ChoiceField(
        choices=OdometerLog.Source.choices, default=OdometerLog.Source.MANUAL,
    )


class VehicleSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)
    insurance_status = serializers.SerializerMethodField()
    tachograph_status = serializers.SerializerMethodField()
    tachograph_reminder = serializers.SerializerMethodField()
    copie_conforma_status = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = [
            'id', 'organization', 'vehicle_type', 'make', 'model', 'display_name',
            'year', 'vin', 'license_plate', 'current_odometer_km',
            'last_oil_change_date', 'last_revision_date',
            'next_revision_date', 'next_revision_at_km', 'status',
            'insurance_provider', 'insurance_policy_number', 'insurance_end_date',
            'insurance_status',
            'tachograph_check_date', 'tachograph_status', 'tachograph_reminder',
            'copie_conforma_expiry_date', 'copie_conforma_status',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_insurance_status(self, obj):
        return compute_insurance_status(obj.insurance_end_date)

    def get_tachograph_status(self, obj):
        if obj.vehicle_type != Vehicle.VehicleType.TRUCK:
            return None
        return compute_tachograph_status(obj.tachograph_check_date)

    def get_copie_conforma_status(self, obj):
        if obj.vehicle_type != Vehicle.VehicleType.TRUCK:
            return None
        return compute_copie_conforma_status(obj.copie_conforma_expiry_date)

    def get_tachograph_reminder(self, obj):
        """True inside the 30 days before the tachograph check is due."""
        if obj.vehicle_type != Vehicle.VehicleType.TRUCK:
            return None
        return should_trigger_tachograph_reminder(obj.tachograph_check_date)
