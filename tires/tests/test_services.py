"""
Tests — TireStockService: integer stock, mounting on vehicles, the
derived mounted view and reversal of mount movements.

@file tires/tests/test_services.py
"""

from datetime import date

import pytest

from core.exceptions import BusinessRuleViolation, InsufficientStockError, ResourceNotFoundError
from core.models import AuditLog
from tests.factories import OrganizationFactory, VehicleFactory
from tires.models import TireMovement
from tires.services import TireStockService


pytestmark = pytest.mark.django_db

D1 = date(2026, 1, 10)
D2 = date(2026, 2, 10)
D3 = date(2026, 3, 10)


@pytest.fixture
def org():
    return OrganizationFactory()


@pytest.fixture
def vehicle(org):
    return VehicleFactory(organization=org)


def _stock(org, quantity=0, **kwargs):
    kwargs.setdefault('brand', 'Michelin')
    kwargs.setdefault('model', 'X Multi')
    kwargs.setdefault('dimension', '315/80R22.5')
    kwargs.setdefault('dot_code', '2324')
    return TireStockService.create_stock(organization_id=org.pk, quantity=quantity, **kwargs)


def _mount(org, vehicle, stock, quantity=1, when=D1):
    return TireStockService.mount_tires(
        organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
        quantity=quantity, date=when,
    )


def _unmount(org, vehicle, stock, quantity=1, when=D2):
    return TireStockService.unmount_tires(
        organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
        quantity=quantity, date=when,
    )


class TestCreateStock:

    def test_missing_fields_get_placeholder(self, org):
        stock = TireStockService.create_stock(organization_id=org.pk, dimension=' 205/55r16 ')
        assert stock.brand == 'N/A'
        assert stock.model == 'N/A'
        assert stock.dot_code == 'N/A'
        assert stock.dimension == '205/55R16'

    def test_opening_balance_movement(self, org):
        stock = _stock(org, quantity=8)
        movement = stock.movements.get()
        assert movement.movement_type == TireMovement.MovementType.INTRARE
        assert movement.quantity == 8

    def test_fractional_quantity_rejected(self, org):
        with pytest.raises(BusinessRuleViolation):
            _stock(org, quantity='2.5')


class TestMounting:

    def test_overmount_refused_and_balance_kept(self, org, vehicle):
        """Stock 10, mount 3 -> 7, mount 8 fails reporting 7 available."""
        stock = _stock(org, quantity=10)
        _mount(org, vehicle, stock, quantity=3)
        stock.refresh_from_db()
        assert stock.quantity == 7

        with pytest.raises(InsufficientStockError) as excinfo:
            _mount(org, vehicle, stock, quantity=8)
        assert excinfo.value.available == 7
        assert 'Available: 7' in str(excinfo.value.detail['detail'][0])
        stock.refresh_from_db()
        assert stock.quantity == 7

    def test_mount_then_unmount_restores_balance(self, org, vehicle):
        stock = _stock(org, quantity=6)
        _mount(org, vehicle, stock, quantity=4, when=D1)
        _unmount(org, vehicle, stock, quantity=4, when=D2)
        assert TireStockService.get_mounted_tires(vehicle.pk, org.pk) == []
        stock.refresh_from_db()
        assert stock.quantity == 6

    def test_mount_records_attribution(self, org, vehicle):
        stock = _stock(org, quantity=2)
        movement = TireStockService.mount_tires(
            organization_id=org.pk, vehicle_id=vehicle.pk, stock_id=stock.pk,
            date=D1, odometer_km=120500, driver_name='  Ion Popescu ', notes='',
        )
        assert movement.quantity == 1
        assert movement.vehicle_id == vehicle.pk
        assert movement.driver_name == 'Ion Popescu'
        assert movement.notes is None

    def test_adjust_only_intrare_iesire(self, org):
        stock = _stock(org, quantity=2)
        with pytest.raises(BusinessRuleViolation):
            TireStockService.adjust_stock(
                stock_id=stock.pk, organization_id=org.pk,
                movement_type=TireMovement.MovementType.MONTARE, quantity=1,
            )


class TestMountedView:

    def test_latest_state_per_stock(self, org, vehicle):
        """MONTARE(A) -> MONTARE(B) -> DEMONTARE(A) leaves only B mounted."""
        stock_a = _stock(org, quantity=4, model='A')
        stock_b = _stock(org, quantity=4, model='B')
        _mount(org, vehicle, stock_a, when=D1)
        mount_b = _mount(org, vehicle, stock_b, when=D2)
        _unmount(org, vehicle, stock_a, when=D3)

        mounted = TireStockService.get_mounted_tires(vehicle.pk, org.pk)
        assert [m.pk for m in mounted] == [mount_b.pk]

    def test_remounted_after_removal(self, org, vehicle):
        stock = _stock(org, quantity=4)
        _mount(org, vehicle, stock, when=D1)
        _unmount(org, vehicle, stock, when=D2)
        latest = _mount(org, vehicle, stock, when=D3)
        assert [m.pk for m in TireStockService.get_mounted_tires(vehicle.pk, org.pk)] == [latest.pk]

    def test_scoped_to_vehicle_and_org(self, org, vehicle):
        stock = _stock(org, quantity=4)
        _mount(org, vehicle, stock)
        other_vehicle = VehicleFactory(organization=org)
        assert TireStockService.get_mounted_tires(other_vehicle.pk, org.pk) == []
        assert TireStockService.get_mounted_tires(vehicle.pk, OrganizationFactory().pk) == []


class TestDeleteMovement:

    def test_reverse_mount_restores_stock(self, org, vehicle):
        stock = _stock(org, quantity=4)
        movement = _mount(org, vehicle, stock, quantity=2)
        stock = TireStockService.delete_movement(movement_id=movement.pk, organization_id=org.pk)
        assert stock.quantity == 4
        assert not TireMovement.objects.filter(pk=movement.pk).exists()
        assert AuditLog.objects.filter(
            action=AuditLog.ActionChoices.REVERSAL, object_id=str(movement.pk),
        ).exists()

    def test_reverse_unmount_subtracts(self, org, vehicle):
        stock = _stock(org, quantity=4)
        _mount(org, vehicle, stock, quantity=2)
        unmount = _unmount(org, vehicle, stock, quantity=2)
        stock = TireStockService.delete_movement(movement_id=unmount.pk, organization_id=org.pk)
        assert stock.quantity == 2

    def test_reverse_unmount_refused_when_stock_gone(self, org, vehicle):
        stock = _stock(org, quantity=2)
        _mount(org, vehicle, stock, quantity=2)
        unmount = _unmount(org, vehicle, stock, quantity=2)
        TireStockService.adjust_stock(
            stock_id=stock.pk, organization_id=org.pk,
            movement_type=TireMovement.MovementType.IESIRE, quantity=1,
        )
        with pytest.raises(InsufficientStockError):
            TireStockService.delete_movement(movement_id=unmount.pk, organization_id=org.pk)
        assert TireMovement.objects.filter(pk=unmount.pk).exists()
        stock.refresh_from_db()
        assert stock.quantity == 1

    def test_plain_adjustment_not_reversible(self, org):
        stock = _stock(org, quantity=2)
        initial = stock.movements.get()
        with pytest.raises(BusinessRuleViolation):
            TireStockService.delete_movement(movement_id=initial.pk, organization_id=org.pk)

    def test_other_tenant_not_found(self, org, vehicle):
        stock = _stock(org, quantity=2)
        movement = _mount(org, vehicle, stock)
        with pytest.raises(ResourceNotFoundError):
            TireStockService.delete_movement(movement_id=movement.pk, organization_id=OrganizationFactory().pk)


class TestDeleteStock:

    def test_zero_balance_deletes(self, org):
        stock = _stock(org)
        TireStockService.delete_stock(stock_id=stock.pk, organization_id=org.pk)
        assert not TireStockService.list_stock(org.pk).exists()

    def test_positive_balance_refused(self, org):
        stock = _stock(org, quantity=5)
        with pytest.raises(BusinessRuleViolation):
            TireStockService.delete_stock(stock_id=stock.pk, organization_id=org.pk)


class TestHistory:

    def test_vehicle_and_recent_feeds(self, org, vehicle):
        stock = _stock(org, quantity=4)
        _mount(org, vehicle, stock, when=D1)
        _unmount(org, vehicle, stock, when=D2)
        vehicle_rows = TireStockService.list_vehicle_movements(vehicle.pk, org.pk)
        assert [m.movement_type for m in vehicle_rows] == ['DEMONTARE', 'MONTARE']
        assert len(TireStockService.list_recent_movements(org.pk, limit=2)) == 2
        assert len(TireStockService.list_stock_movements(stock.pk, org.pk)) == 3
