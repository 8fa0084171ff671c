"""
Tires — Service Layer

Tire stock CRUD, manual adjustments, mounting on / removing from
vehicles, undo of mount movements and the derived "currently mounted"
view. Balance changes go through the shared LedgerEngine.

@file tires/services.py
"""

from django.db.models import QuerySet

from core.constants import FEED_DEFAULT_LIMIT, NOT_AVAILABLE
from core.exceptions import BusinessRuleViolation
from inventory.services import Direction, LedgerEngine, integer_quantity

from .models import TireMovement, TireStock

TIRE_DIRECTIONS = {
    TireMovement.MovementType.INTRARE: Direction.INBOUND,
    TireMovement.MovementType.IESIRE: Direction.OUTBOUND,
    TireMovement.MovementType.MONTARE: Direction.OUTBOUND,
    TireMovement.MovementType.DEMONTARE: Direction.INBOUND,
}

ADJUSTMENT_TYPES = {TireMovement.MovementType.INTRARE, TireMovement.MovementType.IESIRE}
MOUNT_TYPES = {TireMovement.MovementType.MONTARE, TireMovement.MovementType.DEMONTARE}

tire_ledger = LedgerEngine(
    stock_model=TireStock,
    movement_model=TireMovement,
    directions=TIRE_DIRECTIONS,
    quantize=integer_quantity,
    initial_type=TireMovement.MovementType.INTRARE,
    reversible_types=MOUNT_TYPES,
    not_found_message='Tire stock not found.',
)


def _clean_text(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def _or_placeholder(value) -> str:
    return _clean_text(value) or NOT_AVAILABLE


class TireStockService:
    """Tire inventory: stock rows, adjustments, mounting and movement history."""

    # --- Stock --------------------------------------------------------------

    @staticmethod
    def list_stock(organization_id) -> QuerySet:
        return TireStock.objects.filter(organization_id=organization_id).order_by(
            'brand', 'model', 'dimension',
        )

    @staticmethod
    def get_stock(stock_id, organization_id) -> TireStock:
        return tire_ledger.get_stock(stock_id, organization_id)

    @staticmethod
    def create_stock(*, organization_id, brand=None, model=None, dimension=None, dot_code=None,
                     quantity=0, location=None, actor=None) -> TireStock:
        """Missing descriptive fields become "N/A"; dimension is stored upper-case."""
        return tire_ledger.create_stock(
            organization_id=organization_id,
            quantity=quantity,
            actor=actor,
            brand=_or_placeholder(brand),
            model=_or_placeholder(model),
            dimension=_or_placeholder(dimension).upper(),
            dot_code=_or_placeholder(dot_code),
            location=_clean_text(location),
        )

    @staticmethod
    def update_stock(*, stock_id, organization_id, actor=None, **fields) -> TireStock:
        for key in ('brand', 'model', 'dot_code'):
            if key in fields:
                fields[key] = _or_placeholder(fields[key])
        if 'dimension' in fields:
            fields['dimension'] = _or_placeholder(fields['dimension']).upper()
        if 'location' in fields:
            fields['location'] = _clean_text(fields['location'])
        return tire_ledger.update_stock(
            stock_id=stock_id, organization_id=organization_id, actor=actor, **fields,
        )

    @staticmethod
    def delete_stock(*, stock_id, organization_id, actor=None) -> dict:
        """Refused while quantity > 0."""
        return tire_ledger.delete_stock(
            stock_id=stock_id, organization_id=organization_id, actor=actor,
        )

    # --- Movements ----------------------------------------------------------

    @staticmethod
    def adjust_stock(*, stock_id, organization_id, movement_type: str, quantity,
                     date=None, notes: str | None = None, actor=None) -> TireStock:
        if movement_type not in ADJUSTMENT_TYPES:
            raise BusinessRuleViolation(detail='Adjustments must be INTRARE or IESIRE.')
        stock, _movement = tire_ledger.apply_movement(
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
    def _mount_movement(movement_type, *, organization_id, vehicle_id, stock_id, quantity=1,
                        date=None, odometer_km=None, driver_name=None, notes=None,
                        actor=None) -> TireMovement:
        _stock, movement = tire_ledger.apply_movement(
            stock_id=stock_id,
            organization_id=organization_id,
            movement_type=movement_type,
            quantity=quantity,
            date=date,
            actor=actor,
            vehicle_id=vehicle_id,
            odometer_km=odometer_km,
            driver_name=_clean_text(driver_name),
            notes=_clean_text(notes),
        )
        return movement

    @staticmethod
    def mount_tires(**kwargs) -> TireMovement:
        """Tires leave the warehouse onto a vehicle (MONTARE, stock decreases)."""
        return TireStockService._mount_movement(TireMovement.MovementType.MONTARE, **kwargs)

    @staticmethod
    def unmount_tires(**kwargs) -> TireMovement:
        """Tires come off a vehicle back into stock (DEMONTARE, stock increases)."""
        return TireStockService._mount_movement(TireMovement.MovementType.DEMONTARE, **kwargs)

    @staticmethod
    def delete_movement(*, movement_id, organization_id, actor=None) -> TireStock:
        """Undo a MONTARE/DEMONTARE movement and restore the balance."""
        return tire_ledger.reverse_movement(
            movement_id=movement_id, organization_id=organization_id, actor=actor,
        )

    # --- Derived views & history -------------------------------------------

    @staticmethod
    def get_mounted_tires(vehicle_id, organization_id) -> list[TireMovement]:
        """
        Latest MONTARE per stock item on this vehicle that has not been
        followed by a DEMONTARE of the same stock item.
        """
        mounted: dict = {}
        decided: set = set()
        history = (
            TireMovement.objects
            .filter(
                organization_id=organization_id,
                vehicle_id=vehicle_id,
                movement_type__in=MOUNT_TYPES,
            )
            .select_related('stock', 'vehicle', 'created_by')
            .order_by('-date', '-created_at')
        )
        # Newest first: the first mount-type row seen per stock decides its state.
        for movement in history:
            if movement.stock_id in decided:
                continue
            decided.add(movement.stock_id)
            if movement.movement_type == TireMovement.MovementType.MONTARE:
                mounted[movement.stock_id] = movement
        return list(mounted.values())

    @staticmethod
    def _movements(organization_id) -> QuerySet:
        return (
            TireMovement.objects
            .filter(organization_id=organization_id)
            .select_related('stock', 'vehicle', 'created_by')
            .order_by('-date', '-created_at')
        )

    @staticmethod
    def list_stock_movements(stock_id, organization_id, limit: int = 50) -> list[TireMovement]:
        tire_ledger.get_stock(stock_id, organization_id)
        return list(TireStockService._movements(organization_id).filter(stock_id=stock_id)[:limit])

    @staticmethod
    def list_vehicle_movements(vehicle_id, organization_id, limit: int = 50) -> list[TireMovement]:
        return list(TireStockService._movements(organization_id).filter(vehicle_id=vehicle_id)[:limit])

    @staticmethod
    def list_recent_movements(organization_id, limit: int = FEED_DEFAULT_LIMIT) -> list[TireMovement]:
        return list(TireStockService._movements(organization_id)[:limit])
