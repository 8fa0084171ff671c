"""
Tests — OilStockService: stock lifecycle, adjustments, usage on
vehicles and movement history.

@file oil/tests/test_services.py
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from core.exceptions import BusinessRuleViolation, InsufficientStockError, ResourceNotFoundError
from core.models import AuditLog
from inventory.services import INITIAL_STOCK_NOTE
from oil.models import OilMovement
from oil.services import OilStockService
from tests.factories import OrganizationFactory, ServiceEventFactory, UserFactory, VehicleFactory


pytestmark = pytest.mark.django_db


def _stock(org, quantity=0, **kwargs):
    kwargs.setdefault('oil_type', '5W-30')
    kwargs.setdefault('brand', 'Castrol')
    return OilStockService.create_stock(organization_id=org.pk, quantity=quantity, **kwargs)


class TestCreateStock:

    def test_zero_opening_has_no_movement(self):
        stock = _stock(OrganizationFactory())
        assert stock.quantity == Decimal('0.00')
        assert not stock.movements.exists()

    def test_positive_opening_records_initial_intrare(self):
        user = UserFactory()
        stock = _stock(OrganizationFactory(), quantity='12.345', actor=user)
        assert stock.quantity == Decimal('12.35')
        movement = stock.movements.get()
        assert movement.movement_type == OilMovement.MovementType.INTRARE
        assert movement.quantity == Decimal('12.35')
        assert movement.notes == INITIAL_STOCK_NOTE
        assert movement.created_by == user

    def test_blank_type_or_brand_rejected(self):
        with pytest.raises(BusinessRuleViolation):
            _stock(OrganizationFactory(), oil_type='  ')

    def test_negative_opening_rejected(self):
        with pytest.raises(BusinessRuleViolation):
            _stock(OrganizationFactory(), quantity='-1')

    def test_create_is_audited(self):
        stock = _stock(OrganizationFactory())
        assert AuditLog.objects.filter(
            action=AuditLog.ActionChoices.CREATE, model_name='OilStock', object_id=str(stock.pk),
        ).exists()


class TestAdjustStock:

    def test_intrare_then_iesire(self):
        """Create at 0, +20 L, -5 L: balance 15.00 with exactly two movements."""
        org = OrganizationFactory()
        stock = _stock(org)
        OilStockService.adjust_stock(
            stock_id=stock.pk, organization_id=org.pk,
            movement_type=OilMovement.MovementType.INTRARE, quantity='20',
        )
        stock = OilStockService.adjust_stock(
            stock_id=stock.pk, organization_id=org.pk,
            movement_type=OilMovement.MovementType.IESIRE, quantity='5',
        )
        assert stock.quantity == Decimal('15.00')
        assert stock.movements.count() == 2

    def test_usage_type_not_an_adjustment(self):
        org = OrganizationFactory()
        stock = _stock(org, quantity='5')
        with pytest.raises(BusinessRuleViolation):
            OilStockService.adjust_stock(
                stock_id=stock.pk, organization_id=org.pk,
                movement_type=OilMovement.MovementType.UTILIZARE, quantity='1',
            )

    def test_overdraw_message_names_stock_and_available(self):
        org = OrganizationFactory()
        stock = _stock(org, quantity='4')
        with pytest.raises(InsufficientStockError) as excinfo:
            OilStockService.adjust_stock(
                stock_id=stock.pk, organization_id=org.pk,
                movement_type=OilMovement.MovementType.IESIRE, quantity='4.5',
            )
        message = str(excinfo.value.detail['detail'][0])
        assert '5W-30 Castrol' in message
        assert '4.00 L' in message


class TestRecordUsage:

    def test_usage_attributed_to_vehicle(self):
        """Usage of 6 L shows up once in the vehicle's UTILIZARE list."""
        org = OrganizationFactory()
        vehicle = VehicleFactory(organization=org)
        event = ServiceEventFactory(vehicle=vehicle)
        stock = _stock(org, quantity='10')

        movement = OilStockService.record_usage(
            organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
            quantity='6', date=date(2026, 2, 1), service_event_id=event.pk,
            odometer_km=Decimal('101000'),
        )

        usage = OilStockService.list_vehicle_usage(vehicle.pk, org.pk)
        assert [m.pk for m in usage] == [movement.pk]
        assert usage[0].vehicle_id == vehicle.pk
        assert usage[0].service_event_id == event.pk
        stock.refresh_from_db()
        assert stock.quantity == Decimal('4.00')

    def test_usage_from_other_tenant_stock_not_found(self):
        org = OrganizationFactory()
        vehicle = VehicleFactory(organization=org)
        foreign = _stock(OrganizationFactory(), quantity='10')
        with pytest.raises(ResourceNotFoundError):
            OilStockService.record_usage(
                organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=foreign.pk, quantity='1',
            )

    def test_unknown_service_event_not_found(self):
        org = OrganizationFactory()
        vehicle = VehicleFactory(organization=org)
        stock = _stock(org, quantity='10')
        with pytest.raises(ResourceNotFoundError):
            OilStockService.record_usage(
                organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
                quantity='1', service_event_id=uuid.uuid4(),
            )
        stock.refresh_from_db()
        assert stock.quantity == Decimal('10.00')
        assert not stock.movements.filter(movement_type=OilMovement.MovementType.UTILIZARE).exists()

    def test_service_event_of_another_vehicle_not_found(self):
        org = OrganizationFactory()
        vehicle = VehicleFactory(organization=org)
        other_event = ServiceEventFactory(vehicle=VehicleFactory(organization=org))
        stock = _stock(org, quantity='10')
        with pytest.raises(ResourceNotFoundError):
            OilStockService.record_usage(
                organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
                quantity='1', service_event_id=other_event.pk,
            )
        stock.refresh_from_db()
        assert stock.quantity == Decimal('10.00')

    def test_vehicle_of_another_tenant_not_found(self):
        org = OrganizationFactory()
        foreign_vehicle = VehicleFactory(organization=OrganizationFactory())
        stock = _stock(org, quantity='10')
        with pytest.raises(ResourceNotFoundError):
            OilStockService.record_usage(
                organization_id=org.pk, vehicle_id=foreign_vehicle.pk, stock_id=stock.pk, quantity='1',
            )


class TestDeleteStock:

    def test_delete_at_zero(self):
        org = OrganizationFactory()
        stock = _stock(org)
        OilStockService.delete_stock(stock_id=stock.pk, organization_id=org.pk)
        assert not OilStockService.list_stock(org.pk).exists()

    def test_delete_with_balance_refused(self):
        org = OrganizationFactory()
        stock = _stock(org, quantity='2')
        with pytest.raises(BusinessRuleViolation):
            OilStockService.delete_stock(stock_id=stock.pk, organization_id=org.pk)


class TestHistory:

    def test_newest_first_with_limit(self):
        org = OrganizationFactory()
        stock = _stock(org)
        OilStockService.adjust_stock(
            stock_id=stock.pk, organization_id=org.pk,
            movement_type=OilMovement.MovementType.INTRARE, quantity='50',
            date=date(2025, 12, 31),
        )
        for day in (3, 1, 2):
            OilStockService.adjust_stock(
                stock_id=stock.pk, organization_id=org.pk,
                movement_type=OilMovement.MovementType.IESIRE, quantity='1',
                date=date(2026, 1, day),
            )
        rows = OilStockService.list_stock_movements(stock.pk, org.pk, limit=2)
        assert [m.date for m in rows] == [date(2026, 1, 3), date(2026, 1, 2)]

    def test_listing_is_repeatable(self):
        org = OrganizationFactory()
        _stock(org, quantity='5')
        first = [m.pk for m in OilStockService.list_movements(org.pk)]
        second = [m.pk for m in OilStockService.list_movements(org.pk)]
        assert first == second

    def test_unknown_stock_history_not_found(self):
        org = OrganizationFactory()
        stock = _stock(org)
        with pytest.raises(ResourceNotFoundError):
            OilStockService.list_stock_movements(stock.pk, OrganizationFactory().pk)
