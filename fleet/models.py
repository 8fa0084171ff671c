"""
Fleet — Models

Vehicles, their service events and odometer readings. Vehicles are the
attribution target of oil usage and tire mount/unmount movements. The
`status` column is a denormalized copy of the revision classifier
(fleet/status.py), kept for filtering and sorting and refreshed by
VehicleService.recalculate_status after every write that can move it.

@file fleet/models.py
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel, RegulatedModel


class Vehicle(RegulatedModel):

    class VehicleType(models.TextChoices):
        CAR = 'CAR', _('Car')
        TRUCK = 'TRUCK', _('Truck')
        EQUIPMENT = 'EQUIPMENT', _('Equipment')
        TRAILER = 'TRAILER', _('Trailer')

    class StatusChoices(models.TextChoices):
        OK = 'OK', _('OK')
        DUE_SOON = 'DUE_SOON', _('Due soon')
        OVERDUE = 'OVERDUE', _('Overdue')

    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='vehicles',
        verbose_name=_('organization'),
    )
    vehicle_type = models.CharField(
        _('type'), max_length=16, choices=VehicleType.choices,
    )
    make = models.CharField(_('make'), max_length=100)
    model = models.CharField(_('model'), max_length=100)
    year = models.PositiveSmallIntegerField(_('year'))
    vin = models.CharField(_('VIN'), max_length=32, null=True, blank=True, unique=True)
    license_plate = models.CharField(_('license plate'), max_length=20)
    current_odometer_km = models.DecimalField(
        _('current odometer (km)'), max_digits=12, decimal_places=2, default=0,
    )
    last_oil_change_date = models.DateField(_('last oil change'), null=True, blank=True)
    last_revision_date = models.DateField(_('last revision'), null=True, blank=True)
    next_revision_date = models.DateField(_('next revision date'), null=True, blank=True)
    next_revision_at_km = models.DecimalField(
        _('next revision at (km)'), max_digits=12, decimal_places=2, null=True, blank=True,
    )
    insurance_provider = models.CharField(_('insurance provider'), max_length=100, blank=True)
    insurance_policy_number = models.CharField(_('insurance policy'), max_length=100, blank=True)
    insurance_end_date = models.DateField(_('insurance end date'), null=True, blank=True)
    # Trucks only
    tachograph_check_date = models.DateField(_('tachograph check date'), null=True, blank=True)
    copie_conforma_expiry_date = models.DateField(
        _('copie conforma expiry date'), null=True, blank=True,
    )
    status = models.CharField(
        _('status'), max_length=16,
        choices=StatusChoices.choices, default=StatusChoices.OK, db_index=True,
    )

    class Meta:
        verbose_name = _('vehicle')
        verbose_name_plural = _('vehicles')
        ordering = ['license_plate']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'license_plate'],
                name='vehicles_org_license_plate_unique',
            ),
            models.CheckConstraint(
                condition=Q(vehicle_type='TRUCK') | Q(tachograph_check_date__isnull=True),
                name='vehicles_truck_tachograph_check',
            ),
            models.CheckConstraint(
                condition=Q(vehicle_type='TRUCK') | Q(copie_conforma_expiry_date__isnull=True),
                name='vehicles_truck_copie_conforma_check',
            ),
        ]
        indexes = [
            models.Index(fields=['organization', 'status'], name='vehicles_org_status_idx'),
            models.Index(fields=['insurance_end_date'], name='vehicles_insurance_end_idx'),
        ]

    def __str__(self):
        return f'{self.license_plate} ({self.make} {self.model})'

    @property
    def display_name(self) -> str:
        return f'{self.make} {self.model}'


class ServiceEvent(BaseModel):
    """A maintenance intervention; oil usage can be attributed to one."""

    class EventType(models.TextChoices):
        OIL_CHANGE = 'OIL_CHANGE', _('Oil change')
        REVISION = 'REVISION', _('Revision')
        TIRE_CHANGE = 'TIRE_CHANGE', _('Tire change')
        REPAIR = 'REPAIR', _('Repair')
        INSPECTION = 'INSPECTION', _('Inspection')
        OTHER = 'OTHER', _('Other')

    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.CASCADE,
        related_name='service_events',
        verbose_name=_('vehicle'),
    )
    event_type = models.CharField(_('type'), max_length=16, choices=EventType.choices)
    date = models.DateField(_('date'))
    odometer_km = models.DecimalField(
        _('odometer (km)'), max_digits=12, decimal_places=2, null=True, blank=True,
    )
    next_due_km = models.DecimalField(
        _('next due (km)'), max_digits=12, decimal_places=2, null=True, blank=True,
    )
    next_due_date = models.DateField(_('next due date'), null=True, blank=True)
    notes = models.TextField(_('notes'), blank=True)

    class Meta:
        verbose_name = _('service event')
        verbose_name_plural = _('service events')
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.event_type} {self.date} vehicle={self.vehicle_id}'


class OdometerLog(BaseModel):
    """A dated odometer reading; the highest reading becomes current_odometer_km."""

    class Source(models.TextChoices):
        MANUAL = 'MANUAL', _('Manual')
        IMPORT = 'IMPORT', _('Import')

    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.CASCADE,
        related_name='odometer_logs',
        verbose_name=_('vehicle'),
    )
    date = models.DateField(_('date'))
    value_km = models.DecimalField(_('reading (km)'), max_digits=12, decimal_places=2)
    source = models.CharField(
        _('source'), max_length=8, choices=Source.choices, default=Source.MANUAL,
    )

    class Meta:
        verbose_name = _('odometer log')
        verbose_name_plural = _('odometer logs')
        ordering = ['-date', '-created_at']
        constraints = [
            models.CheckConstraint(condition=Q(value_km__gte=0), name='odometer_logs_value_non_negative'),
        ]

    def __str__(self):
        return f'{self.value_km} km {self.date} vehicle={self.vehicle_id}'
