"""
Fleet — Service Layer

Odometer readings and service events, the vehicle fields they move
forward, the denormalized status kept in step with the classifier after
each of those writes, and the per-organization dashboard aggregates.

@file fleet/services.py
"""

import logging
from collections import Counter
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from core.constants import (
    AUDIT_ACTION_CREATE,
    AUDIT_ACTION_DELETE,
    AUDIT_ACTION_STATUS_CHANGE,
    AUDIT_ACTION_UPDATE,
)
from core.exceptions import BusinessRuleViolation, ResourceNotFoundError
from core.services import AuditService

from .models import OdometerLog, ServiceEvent, Vehicle
from .status import (
    DueStatus,
    compute_copie_conforma_status,
    compute_insurance_status,
    compute_tachograph_status,
    compute_vehicle_status,
    should_trigger_tachograph_reminder,
)

logger = logging.getLogger('fleetdesk')

ODOMETER_HISTORY_LIMIT = 120


class VehicleService:

    @staticmethod
    def get_vehicle(vehicle_id, organization_id) -> Vehicle:
        try:
            return Vehicle.objects.get(
                pk=vehicle_id, organization_id=organization_id, is_deleted=False,
            )
        except (Vehicle.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Vehicle not found.')

    @staticmethod
    def get_service_event(event_id, vehicle_id) -> ServiceEvent:
        """An event of this vehicle; another vehicle's event is simply not found."""
        try:
            return ServiceEvent.objects.get(pk=event_id, vehicle_id=vehicle_id)
        except (ServiceEvent.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Service event not found.')

    @staticmethod
    def _locked_vehicle(vehicle_id, organization_id) -> Vehicle:
        try:
            return Vehicle.objects.select_for_update().get(
                pk=vehicle_id, organization_id=organization_id, is_deleted=False,
            )
        except (Vehicle.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Vehicle not found.')

    # --- Odometer -----------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def record_odometer(*, vehicle_id, organization_id, value_km, date=None,
                        source=OdometerLog.Source.MANUAL, actor=None) -> OdometerLog:
        """
        Log a reading. Only a reading above the vehicle's current odometer
        moves current_odometer_km, and with it the km side of the status.
        """
        vehicle = VehicleService._locked_vehicle(vehicle_id, organization_id)
        value_km = Decimal(str(value_km))
        if value_km < 0:
            raise BusinessRuleViolation(detail='Odometer reading cannot be negative.')

        log = OdometerLog.objects.create(
            vehicle=vehicle,
            date=date or timezone.localdate(),
            value_km=value_km,
            source=source,
            created_by=actor,
        )
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='OdometerLog',
            object_id=str(log.pk),
            organization_id=organization_id,
            new_values=AuditService.snapshot(log),
        )

        if value_km > vehicle.current_odometer_km:
            VehicleService._update_vehicle(
                vehicle, {'current_odometer_km': value_km}, actor,
            )
            VehicleService.recalculate_status(vehicle.pk, actor=actor)
        return log

    @staticmethod
    def list_odometer_logs(vehicle_id, organization_id, limit: int = ODOMETER_HISTORY_LIMIT):
        vehicle = VehicleService.get_vehicle(vehicle_id, organization_id)
        return list(vehicle.odometer_logs.order_by('-date', '-created_at')[:limit])

    # --- Service events -----------------------------------------------------

    @staticmethod
    def _event_updates(vehicle: Vehicle, event: ServiceEvent) -> dict:
        """Vehicle fields a service event moves forward."""
        updates = {}
        if event.event_type == ServiceEvent.EventType.REVISION:
            updates['last_revision_date'] = event.date
        if event.event_type == ServiceEvent.EventType.OIL_CHANGE:
            updates['last_oil_change_date'] = event.date
        if event.next_due_date:
            updates['next_revision_date'] = event.next_due_date
        if event.next_due_km is not None:
            updates['next_revision_at_km'] = event.next_due_km
        if event.odometer_km is not None and event.odometer_km > vehicle.current_odometer_km:
            updates['current_odometer_km'] = event.odometer_km
        return updates

    @staticmethod
    def _update_vehicle(vehicle: Vehicle, updates: dict, actor) -> None:
        old_values = {field: getattr(vehicle, field) for field in updates}
        for field, value in updates.items():
            setattr(vehicle, field, value)
        vehicle.updated_by = actor
        vehicle.save(update_fields=[*updates, 'updated_by', 'updated_at'])
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='Vehicle',
            object_id=str(vehicle.pk),
            organization_id=vehicle.organization_id,
            old_values={key: str(value) if value is not None else None for key, value in old_values.items()},
            new_values={key: str(value) for key, value in updates.items()},
        )

    @staticmethod
    @transaction.atomic
    def record_service_event(*, vehicle_id, organization_id, event_type, date=None,
                             odometer_km=None, next_due_km=None, next_due_date=None,
                             notes='', actor=None) -> ServiceEvent:
        """
        Record an intervention and carry it over to the vehicle:
        OIL_CHANGE sets last_oil_change_date, REVISION sets last_revision_date,
        next_due_* replace the next revision targets and a higher odometer
        reading advances current_odometer_km. The status is recalculated.
        """
        vehicle = VehicleService._locked_vehicle(vehicle_id, organization_id)
        if next_due_km is not None and next_due_km <= 0:
            raise BusinessRuleViolation(detail='next_due_km must be positive.')

        event = ServiceEvent.objects.create(
            vehicle=vehicle,
            event_type=event_type,
            date=date or timezone.localdate(),
            odometer_km=odometer_km,
            next_due_km=next_due_km,
            next_due_date=next_due_date,
            notes=(notes or '').strip(),
            created_by=actor,
        )
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='ServiceEvent',
            object_id=str(event.pk),
            organization_id=organization_id,
            new_values=AuditService.snapshot(event),
        )

        updates = VehicleService._event_updates(vehicle, event)
        if updates:
            VehicleService._update_vehicle(vehicle, updates, actor)
        VehicleService.recalculate_status(vehicle.pk, actor=actor)
        logger.info('ServiceEvent %s %s recorded for vehicle %s.', event.event_type, event.pk, vehicle.pk)
        return event

    @staticmethod
    def list_service_events(vehicle_id, organization_id) -> list[ServiceEvent]:
        vehicle = VehicleService.get_vehicle(vehicle_id, organization_id)
        return list(vehicle.service_events.order_by('-date', '-created_at'))

    @staticmethod
    @transaction.atomic
    def delete_service_event(*, event_id, vehicle_id, organization_id, actor=None) -> None:
        """
        Remove an event. Dates it already copied onto the vehicle stay;
        oil usage attributed to it keeps its row with the link cleared.
        """
        vehicle = VehicleService._locked_vehicle(vehicle_id, organization_id)
        event = VehicleService.get_service_event(event_id, vehicle.pk)
        old_snapshot = AuditService.snapshot(event)
        event.delete()
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DELETE,
            model_name='ServiceEvent',
            object_id=str(event_id),
            organization_id=organization_id,
            old_values=old_snapshot,
        )
        VehicleService.recalculate_status(vehicle.pk, actor=actor)

    # --- Status -------------------------------------------------------------

    @staticmethod
    def _classify(vehicle: Vehicle, today: date | None = None) -> str:
        return compute_vehicle_status(
            next_revision_date=vehicle.next_revision_date,
            next_revision_at_km=vehicle.next_revision_at_km,
            current_odometer_km=vehicle.current_odometer_km,
            today=today,
        )

    @staticmethod
    @transaction.atomic
    def recalculate_status(vehicle_id, *, actor=None, today: date | None = None) -> Vehicle:
        """Recompute and persist Vehicle.status; audited only when it changes."""
        try:
            vehicle = Vehicle.objects.select_for_update().get(pk=vehicle_id, is_deleted=False)
        except Vehicle.DoesNotExist:
            raise ResourceNotFoundError(detail='Vehicle not found.')

        old_status = vehicle.status
        new_status = VehicleService._classify(vehicle, today)
        if new_status != old_status:
            vehicle.status = new_status
            vehicle.updated_by = actor
            vehicle.save(update_fields=['status', 'updated_by', 'updated_at'])
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_STATUS_CHANGE,
                model_name='Vehicle',
                object_id=str(vehicle.pk),
                organization_id=vehicle.organization_id,
                old_values={'status': old_status},
                new_values={'status': new_status},
            )
            logger.info('Vehicle %s status %s -> %s.', vehicle.pk, old_status, new_status)
        return vehicle

    @staticmethod
    def refresh_all_statuses(today: date | None = None) -> int:
        """Recalculate every live vehicle; returns how many changed."""
        changed = 0
        for vehicle in Vehicle.objects.filter(is_deleted=False).only(
            'id', 'status', 'next_revision_date', 'next_revision_at_km', 'current_odometer_km',
        ).iterator():
            if VehicleService._classify(vehicle, today) != vehicle.status:
                VehicleService.recalculate_status(vehicle.pk, today=today)
                changed += 1
        return changed

    @staticmethod
    def dashboard_summary(organization_id, today: date | None = None) -> dict:
        """Counts per status family plus inventory totals for one organization."""
        from oil.models import OilStock
        from tires.models import TireMovement, TireStock

        vehicles = list(Vehicle.objects.filter(organization_id=organization_id, is_deleted=False))

        status_counts = Counter({choice: 0 for choice in Vehicle.StatusChoices.values})
        insurance = Counter({choice: 0 for choice in DueStatus.values})
        tachograph = Counter({choice: 0 for choice in DueStatus.values})
        copie_conforma = Counter({choice: 0 for choice in DueStatus.values})
        tachograph_reminders = 0
        for vehicle in vehicles:
            status_counts[VehicleService._classify(vehicle, today)] += 1
            insurance[compute_insurance_status(vehicle.insurance_end_date, today)] += 1
            if vehicle.vehicle_type == Vehicle.VehicleType.TRUCK:
                tachograph[compute_tachograph_status(vehicle.tachograph_check_date, today)] += 1
                if should_trigger_tachograph_reminder(vehicle.tachograph_check_date, today=today):
                    tachograph_reminders += 1
                copie_conforma[
                    compute_copie_conforma_status(vehicle.copie_conforma_expiry_date, today)
                ] += 1

        oil = OilStock.objects.filter(organization_id=organization_id).aggregate(
            items=Count('id'), liters=Sum('quantity'),
        )
        tires = TireStock.objects.filter(organization_id=organization_id).aggregate(
            items=Count('id'), units=Sum('quantity'),
        )
        mount_movements = TireMovement.objects.filter(
            organization_id=organization_id,
            movement_type=TireMovement.MovementType.MONTARE,
        ).count()

        return {
            'vehicles_total': len(vehicles),
            'vehicle_status': dict(status_counts),
            'insurance_status': dict(insurance),
            'tachograph_status': dict(tachograph),
            'tachograph_reminders': tachograph_reminders,
            'copie_conforma_status': dict(copie_conforma),
            'oil_stock': {
                'items': oil['items'],
                'liters': oil['liters'] or 0,
            },
            'tire_stock': {
                'items': tires['items'],
                'units': tires['units'] or 0,
                'mount_movements': mount_movements,
            },
        }
