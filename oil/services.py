"""
Oil — Service Layer

Oil stock CRUD, manual adjustments and usage on vehicles. Every balance
change goes through the shared LedgerEngine; the read helpers return
querysets already joined with stock and vehicle labels.

@file oil/services.py
"""

from django.db.models import QuerySet

from core.constants import FEED_MAX_LIMIT
from core.exceptions import BusinessRuleViolation
from fleet.services import VehicleService
from inventory.services import Direction, LedgerEngine, decimal_quantity

from .models import OilMovement, OilStock

OIL_DIRECTIONS = {
    OilMovement.MovementType.INTRARE: Direction.INBOUND,
    OilMovement.MovementType.IESIRE: Direction.OUTBOUND,
    OilMovement.MovementType.UTILIZARE: Direction.OUTBOUND,
}

ADJUSTMENT_TYPES = {OilMovement.MovementType.INTRARE, OilMovement.MovementType.IESIRE}

oil_ledger = LedgerEngine(
    stock_model=OilStock,
    movement_model=OilMovement,
    directions=OIL_DIRECTIONS,
    quantize=decimal_quantity(2),
    initial_type=OilMovement.MovementType.INTRARE,
    unit='L',
    not_found_message='Oil stock not found.',
)


def _clean_text(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


class OilStockService:
    """Oil inventory: stock rows, adjustments, usage and movement history."""

    # --- Stock --------------------------------------------------------------

    @staticmethod
    def list_stock(organization_id) -> QuerySet:
        return OilStock.objects.filter(organization_id=organization_id).order_by('oil_type', 'brand')

    @staticmethod
    def get_stock(stock_id, organization_id) -> OilStock:
        return oil_ledger.get_stock(stock_id, organization_id)

    @staticmethod
    def create_stock(*, organization_id, oil_type: str, brand: str, quantity=0,
                     location: str | None = None, actor=None) -> OilStock:
        oil_type = (oil_type or '').strip()
        brand = (brand or '').strip()
        if not oil_type or not brand:
            raise BusinessRuleViolation(detail='Oil type and brand are required.')
        return oil_ledger.create_stock(
            organization_id=organization_id,
            quantity=quantity,
            actor=actor,
            oil_type=oil_type,
            brand=brand,
            location=_clean_text(location),
        )

    @staticmethod
    def update_stock(*, stock_id, organization_id, actor=None, **fields) -> OilStock:
        for key in ('oil_type', 'brand'):
            if key in fields:
                fields[key] = (fields[key] or '').strip()
                if not fields[key]:
                    raise BusinessRuleViolation(detail=f'{key} cannot be empty.')
        if 'location' in fields:
            fields['location'] = _clean_text(fields['location'])
        return oil_ledger.update_stock(
            stock_id=stock_id, organization_id=organization_id, actor=actor, **fields,
        )

    @staticmethod
    def delete_stock(*, stock_id, organization_id, actor=None) -> dict:
        return oil_ledger.delete_stock(
            stock_id=stock_id, organization_id=organization_id, actor=actor,
        )

    # --- Movements ----------------------------------------------------------

    @staticmethod
    def adjust_stock(*, stock_id, organization_id, movement_type: str, quantity,
                     date=None, notes: str | None = None, actor=None) -> OilStock:
        """Manual correction (restock or write-off); no vehicle attribution."""
        if movement_type not in ADJUSTMENT_TYPES:
            raise BusinessRuleViolation(detail='Adjustments must be INTRARE or IESIRE.')
        stock, _movement = oil_ledger.apply_movement(
            stock_id=stock_id,
            organization_id=organization_id,
            movement_type=movement_type,
            quantity=quantity,
            date=date,
            actor=actor,
            notes=_clean_text(notes),
        )
        return stock

    @staticmethod
    def record_usage(*, organization_id, vehicle_id, stock_id, quantity, date=None,
                     service_event_id=None, odometer_km=None, notes: str | None = None,
                     actor=None) -> OilMovement:
        """
        Oil consumed on a vehicle (UTILIZARE); returns the movement.

        The vehicle must belong to the organization and a service event,
        when given, to that vehicle.
        """
        vehicle = VehicleService.get_vehicle(vehicle_id, organization_id)
        if service_event_id is not None:
            VehicleService.get_service_event(service_event_id, vehicle.pk)
        _stock, movement = oil_ledger.apply_movement(
            stock_id=stock_id,
            organization_id=organization_id,
            movement_type=OilMovement.MovementType.UTILIZARE,
            quantity=quantity,
            date=date,
            actor=actor,
            vehicle_id=vehicle.pk,
            service_event_id=service_event_id,
            odometer_km=odometer_km,
            notes=_clean_text(notes),
        )
        return movement

    # --- History ------------------------------------------------------------

    @staticmethod
    def _movements(organization_id) -> QuerySet:
        return (
            OilMovement.objects
            .filter(organization_id=organization_id)
            .select_related('stock', 'vehicle', 'created_by')
            .order_by('-date', '-created_at')
        )

    @staticmethod
    def list_stock_movements(stock_id, organization_id, limit: int = 50) -> list[OilMovement]:
        oil_ledger.get_stock(stock_id, organization_id)
        return list(OilStockService._movements(organization_id).filter(stock_id=stock_id)[:limit])

    @staticmethod
    def list_vehicle_usage(vehicle_id, organization_id, limit: int = 10) -> list[OilMovement]:
        return list(
            OilStockService._movements(organization_id).filter(
                vehicle_id=vehicle_id,
                movement_type=OilMovement.MovementType.UTILIZARE,
            )[:limit]
        )

    @staticmethod
    def list_movements(organization_id, limit: int = FEED_MAX_LIMIT) -> list[OilMovement]:
        return list(OilStockService._movements(organization_id)[:limit])
