"""
FleetDesk — Test Factories

Factory Boy factories for generating test data. Used across all test
modules.

@file tests/factories.py
"""

from datetime import timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone

from fleet.models import ServiceEvent, Vehicle
from oil.models import OilStock
from organizations.models import Membership, Organization
from tires.models import TireStock


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f'user-{n}')
    email = factory.LazyAttribute(lambda o: f'{o.username}@fleet.test')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        password = extracted or 'TestPass2026!'
        self.set_password(password)
        if create:
            self.save(update_fields=['password'])


class SuperuserFactory(UserFactory):
    is_staff = True
    is_superuser = True


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------

class OrganizationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Organization

    name = factory.Sequence(lambda n: f'Transport SRL {n}')


class MembershipFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Membership

    organization = factory.SubFactory(OrganizationFactory)
    user = factory.SubFactory(UserFactory)
    role = Membership.RoleChoices.MECHANIC


# ---------------------------------------------------------------------------
# Fleet
# ---------------------------------------------------------------------------

class VehicleFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Vehicle

    organization = factory.SubFactory(OrganizationFactory)
    vehicle_type = Vehicle.VehicleType.TRUCK
    make = 'Volvo'
    model = 'FH16'
    year = 2020
    license_plate = factory.Sequence(lambda n: f'B-{n:03d}-FLT')
    current_odometer_km = Decimal('100000.00')
    next_revision_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=120))
    next_revision_at_km = Decimal('130000.00')
    insurance_end_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=200))
    tachograph_check_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=200))
    copie_conforma_expiry_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=200))


class CarFactory(VehicleFactory):
    vehicle_type = Vehicle.VehicleType.CAR
    make = 'Dacia'
    model = 'Logan'
    tachograph_check_date = None
    copie_conforma_expiry_date = None


class ServiceEventFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ServiceEvent

    vehicle = factory.SubFactory(VehicleFactory)
    event_type = ServiceEvent.EventType.OIL_CHANGE
    date = factory.LazyFunction(timezone.localdate)
    odometer_km = Decimal('100000.00')


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
# Balances are set directly here; tests that care about the movement
# history go through the services instead.

class OilStockFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OilStock

    organization = factory.SubFactory(OrganizationFactory)
    oil_type = '5W30'
    brand = factory.Sequence(lambda n: f'Brand-{n}')
    quantity = Decimal('0.00')


class TireStockFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = TireStock

    organization = factory.SubFactory(OrganizationFactory)
    brand = 'Michelin'
    model = factory.Sequence(lambda n: f'X Multi {n}')
    dimension = '315/80R22.5'
    dot_code = '2324'
    quantity = 0
