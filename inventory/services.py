"""
Inventory — Ledger Engine

One read-modify-write algorithm for every commodity: lock the stock row,
compute the new balance from the movement type's direction, refuse to go
below zero, persist the balance and append the movement, all inside one
transaction. Each commodity supplies its own type -> direction table and
quantity rule instead of repeating the transaction logic.

Quantities are stored unsigned; the sign is always reconstructed from
movement_type through the direction table. That table is therefore part
of the stored contract: changing a type's direction reinterprets history.

@file inventory/services.py
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import IntEnum

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, OperationalError, connection, transaction
from django.utils import timezone

from core.constants import (
    AUDIT_ACTION_CREATE,
    AUDIT_ACTION_DELETE,
    AUDIT_ACTION_REVERSAL,
    AUDIT_ACTION_UPDATE,
)
from core.exceptions import (
    BusinessRuleViolation,
    ConcurrentUpdateError,
    InsufficientStockError,
    ResourceNotFoundError,
)
from core.services import AuditService

logger = logging.getLogger('fleetdesk')

INITIAL_STOCK_NOTE = 'Initial stock'


class Direction(IntEnum):
    INBOUND = 1
    OUTBOUND = -1


# ---------------------------------------------------------------------------
# Quantity rules
# ---------------------------------------------------------------------------

def decimal_quantity(places: int = 2) -> Callable:
    """Quantity rule for liquids: Decimal rounded half-up to `places`."""
    exponent = Decimal(1).scaleb(-places)

    def quantize(value) -> Decimal:
        try:
            return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError):
            raise BusinessRuleViolation(detail=f'Invalid quantity: {value!r}.')

    return quantize


def integer_quantity(value) -> int:
    """Quantity rule for countable items: whole numbers only."""
    try:
        as_decimal = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise BusinessRuleViolation(detail=f'Invalid quantity: {value!r}.')
    if as_decimal != as_decimal.to_integral_value():
        raise BusinessRuleViolation(detail='Quantity must be a whole number.')
    return int(as_decimal)


def _actor_or_none(actor):
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return None
    return actor


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class LedgerEngine:
    """
    Balance + movement ledger for one commodity.

    stock_model / movement_model: concrete subclasses of
    inventory.models.StockItem / StockMovementBase.
    directions: movement_type -> Direction, the only place signs live.
    quantize: normalises a raw magnitude to the commodity's numeric type.
    reversible_types: movement types reverse_movement may undo.
    """

    def __init__(
        self,
        *,
        stock_model,
        movement_model,
        directions: Mapping[str, Direction],
        quantize: Callable,
        initial_type: str,
        unit: str = '',
        reversible_types: Iterable[str] = (),
        not_found_message: str = 'Stock item not found.',
    ):
        if directions.get(initial_type) is not Direction.INBOUND:
            raise ValueError('initial_type must be an inbound movement type.')
        self.stock_model = stock_model
        self.movement_model = movement_model
        self.directions = dict(directions)
        self.quantize = quantize
        self.initial_type = initial_type
        self.unit = unit
        self.reversible_types = frozenset(reversible_types)
        self.not_found_message = not_found_message

    @property
    def model_name(self) -> str:
        return self.stock_model.__name__

    # -- helpers -------------------------------------------------------------

    def signed_delta(self, movement_type: str, quantity):
        try:
            direction = self.directions[movement_type]
        except KeyError:
            raise BusinessRuleViolation(detail=f'Invalid movement_type: {movement_type}')
        return quantity * int(direction)

    def _positive(self, quantity):
        value = self.quantize(quantity)
        if value <= 0:
            raise BusinessRuleViolation(detail='Quantity must be positive.')
        return value

    def max_quantity(self):
        """Largest balance the stock's quantity column can hold."""
        field = self.stock_model._meta.get_field('quantity')
        if field.get_internal_type() == 'DecimalField':
            places = field.decimal_places
            return Decimal(10) ** (field.max_digits - places) - Decimal(1).scaleb(-places)
        _low, high = connection.ops.integer_field_range(field.get_internal_type())
        return high

    def _check_capacity(self, stock_label: str, new_quantity):
        limit = self.max_quantity()
        if limit is not None and new_quantity > limit:
            raise BusinessRuleViolation(
                detail=f'{stock_label}: balance would exceed the maximum of {limit} {self.unit}'.rstrip() + '.',
            )

    def get_stock(self, stock_id, organization_id, *, for_update: bool = False):
        """Point lookup by (id, organization); another tenant's row is simply not found."""
        qs = self.stock_model.objects.all()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=stock_id, organization_id=organization_id)
        except (self.stock_model.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail=self.not_found_message)
        except OperationalError:
            # Lock wait timed out or deadlock victim.
            raise ConcurrentUpdateError()

    def _save_balance(self, stock, new_quantity, actor):
        stock.quantity = new_quantity
        stock.updated_by = actor
        try:
            stock.save(update_fields=['quantity', 'updated_by', 'updated_at'])
        except IntegrityError:
            # Storage-level quantity >= 0 constraint tripped: the row moved under us.
            raise ConcurrentUpdateError()

    # -- writes --------------------------------------------------------------

    @transaction.atomic
    def create_stock(self, *, organization_id, quantity=0, actor=None, **fields):
        """Insert a stock row; a positive opening balance is recorded as an inbound movement."""
        actor = _actor_or_none(actor)
        opening = self.quantize(quantity)
        if opening < 0:
            raise BusinessRuleViolation(detail='Quantity cannot be negative.')
        self._check_capacity(self.model_name, opening)

        stock = self.stock_model(
            organization_id=organization_id,
            quantity=opening,
            created_by=actor,
            updated_by=actor,
            **fields,
        )
        stock.full_clean()
        stock.save()

        if opening > 0:
            self.movement_model.objects.create(
                stock=stock,
                organization_id=organization_id,
                movement_type=self.initial_type,
                quantity=opening,
                date=timezone.localdate(),
                notes=INITIAL_STOCK_NOTE,
                created_by=actor,
            )

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name=self.model_name,
            object_id=str(stock.pk),
            organization_id=organization_id,
            new_values=AuditService.snapshot(stock),
        )
        logger.info('%s %s created qty=%s org=%s', self.model_name, stock.pk, opening, organization_id)
        return stock

    @transaction.atomic
    def update_stock(self, *, stock_id, organization_id, actor=None, **fields):
        """Descriptive fields only; the balance moves exclusively through movements."""
        actor = _actor_or_none(actor)
        stock = self.get_stock(stock_id, organization_id, for_update=True)

        for key in ('quantity', 'organization', 'organization_id', 'id'):
            fields.pop(key, None)

        old_snapshot = AuditService.snapshot(stock)
        for field, value in fields.items():
            if hasattr(stock, field):
                setattr(stock, field, value)
        stock.updated_by = actor
        stock.full_clean()
        stock.save()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name=self.model_name,
            object_id=str(stock.pk),
            organization_id=organization_id,
            old_values=old_snapshot,
            new_values=AuditService.snapshot(stock),
        )
        return stock

    @transaction.atomic
    def delete_stock(self, *, stock_id, organization_id, actor=None):
        """Remove a stock row (and its history); only allowed at a zero balance."""
        actor = _actor_or_none(actor)
        stock = self.get_stock(stock_id, organization_id, for_update=True)
        if stock.quantity != 0:
            raise BusinessRuleViolation(
                detail=(
                    f'Cannot delete {stock.label}: {stock.quantity} {self.unit}'.rstrip()
                    + ' still in stock. Reduce stock to zero first.'
                ),
            )

        old_snapshot = AuditService.snapshot(stock)
        stock_pk = stock.pk
        stock.delete()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_DELETE,
            model_name=self.model_name,
            object_id=str(stock_pk),
            organization_id=organization_id,
            old_values=old_snapshot,
        )
        logger.info('%s %s deleted org=%s', self.model_name, stock_pk, organization_id)
        return old_snapshot

    @transaction.atomic
    def apply_movement(
        self,
        *,
        stock_id,
        organization_id,
        movement_type: str,
        quantity,
        date=None,
        actor=None,
        **attribution,
    ):
        """
        Apply one movement under a row lock on the stock.

        Returns (stock, movement). Raises ResourceNotFoundError for an
        unknown (stock, organization) pair and InsufficientStockError when
        the balance would go negative; nothing is persisted in either case.
        """
        actor = _actor_or_none(actor)
        magnitude = self._positive(quantity)
        delta = self.signed_delta(movement_type, magnitude)

        stock = self.get_stock(stock_id, organization_id, for_update=True)
        current = stock.quantity
        new_quantity = current + delta
        if new_quantity < 0:
            raise InsufficientStockError(label=stock.label, available=current, unit=self.unit)
        self._check_capacity(stock.label, new_quantity)

        self._save_balance(stock, new_quantity, actor)

        movement = self.movement_model.objects.create(
            stock=stock,
            organization_id=organization_id,
            movement_type=movement_type,
            quantity=magnitude,
            date=date or timezone.localdate(),
            created_by=actor,
            **attribution,
        )

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name=self.movement_model.__name__,
            object_id=str(movement.pk),
            organization_id=organization_id,
            new_values={
                'stock_id': str(stock.pk),
                'movement_type': movement_type,
                'quantity': str(magnitude),
                'balance_before': str(current),
                'balance_after': str(new_quantity),
            },
        )
        logger.info(
            '%s %s %s qty=%s stock=%s balance=%s->%s',
            self.movement_model.__name__, movement_type, movement.pk,
            magnitude, stock.pk, current, new_quantity,
        )
        return stock, movement

    def _locked_movement(self, movement_id, organization_id):
        qs = self.movement_model.objects.select_for_update()
        try:
            return qs.get(pk=movement_id, organization_id=organization_id)
        except (self.movement_model.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Movement not found.')
        except OperationalError:
            raise ConcurrentUpdateError()

    @transaction.atomic
    def reverse_movement(self, *, movement_id, organization_id, actor=None):
        """
        Undo a reversible movement: put the balance back as if it never
        happened, then delete the movement row. Returns the stock.

        The stock row is locked before the movement is read, so of two
        concurrent reversals of one movement only the first finds it.
        """
        actor = _actor_or_none(actor)
        try:
            stock_id = (
                self.movement_model.objects
                .filter(pk=movement_id, organization_id=organization_id)
                .values_list('stock_id', flat=True)
                .get()
            )
        except (self.movement_model.DoesNotExist, DjangoValidationError):
            raise ResourceNotFoundError(detail='Movement not found.')

        stock = self.get_stock(stock_id, organization_id, for_update=True)
        # Re-read under the stock lock; a reversal that committed meanwhile has removed it.
        movement = self._locked_movement(movement_id, organization_id)

        if movement.movement_type not in self.reversible_types:
            allowed = '/'.join(sorted(self.reversible_types))
            if not allowed:
                raise BusinessRuleViolation(detail=f'{movement.movement_type} movements are permanent.')
            raise BusinessRuleViolation(
                detail=f'Only {allowed} movements can be deleted; '
                       f'{movement.movement_type} is permanent.',
            )

        current = stock.quantity
        reversed_quantity = current - self.signed_delta(movement.movement_type, movement.quantity)
        if reversed_quantity < 0:
            raise InsufficientStockError(label=stock.label, available=current, unit=self.unit)
        self._check_capacity(stock.label, reversed_quantity)

        self._save_balance(stock, reversed_quantity, actor)

        old_snapshot = AuditService.snapshot(movement)
        # Instance delete() is blocked for movements; go through the queryset.
        deleted, _ = self.movement_model.objects.filter(pk=movement.pk).delete()
        if deleted != 1:
            raise ConcurrentUpdateError()

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_REVERSAL,
            model_name=self.movement_model.__name__,
            object_id=str(movement_id),
            organization_id=organization_id,
            old_values=old_snapshot,
            new_values={
                'balance_before': str(current),
                'balance_after': str(reversed_quantity),
            },
        )
        logger.info(
            '%s %s reversed stock=%s balance=%s->%s',
            self.movement_model.__name__, movement_id, stock.pk, current, reversed_quantity,
        )
        return stock
