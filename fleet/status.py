"""
Fleet — Status Classifier

Pure date / km classifiers used to flag vehicles and feed the dashboard.
Every function accepts an optional `today` so callers (and tests) can pin
the reference date; otherwise the local date of the active timezone is
used. Dates may be given as `date`, `datetime` or ISO strings; anything
unparsable counts as absent.

@file fleet/status.py
"""

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation

from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.utils.translation import gettext_lazy as _

REVISION_SOON_DAYS = 14
REVISION_SOON_KM = 1000
DOCUMENT_SOON_DAYS = 30


class DueStatus(models.TextChoices):
    OK = 'ok', _('OK')
    SOON = 'soon', _('Soon')
    OVERDUE = 'overdue', _('Overdue')
    MISSING = 'missing', _('Missing')


# Mirrors fleet.models.Vehicle.StatusChoices; kept here so this module has
# no model imports.
VEHICLE_OK = 'OK'
VEHICLE_DUE_SOON = 'DUE_SOON'
VEHICLE_OVERDUE = 'OVERDUE'


def _today(today: date | None) -> date:
    return today or timezone.localdate()


def _to_date(value) -> date | None:
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_date(str(value)[:10])
    except ValueError:
        return None


def _to_decimal(value) -> Decimal | None:
    if value in (None, ''):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _classify_document(expiry, today: date | None, when_absent: str) -> str:
    expiry_date = _to_date(expiry)
    if expiry_date is None:
        return when_absent
    days = (expiry_date - _today(today)).days
    if days < 0:
        return DueStatus.OVERDUE
    if days <= DOCUMENT_SOON_DAYS:
        return DueStatus.SOON
    return DueStatus.OK


def compute_vehicle_status(
    *,
    next_revision_date=None,
    next_revision_at_km=None,
    current_odometer_km=0,
    today: date | None = None,
) -> str:
    """OVERDUE if past the date or km; DUE_SOON within 14 days or 1000 km; else OK."""
    revision_date = _to_date(next_revision_date)
    days_left = (revision_date - _today(today)).days if revision_date else None

    revision_km = _to_decimal(next_revision_at_km)
    odometer = _to_decimal(current_odometer_km) or Decimal('0')
    km_left = revision_km - odometer if revision_km is not None else None

    if (days_left is not None and days_left < 0) or (km_left is not None and km_left < 0):
        return VEHICLE_OVERDUE
    if (days_left is not None and days_left <= REVISION_SOON_DAYS) or (
        km_left is not None and km_left <= REVISION_SOON_KM
    ):
        return VEHICLE_DUE_SOON
    return VEHICLE_OK


def compute_insurance_status(end_date, today: date | None = None) -> str:
    # No policy on file is treated as expired.
    return _classify_document(end_date, today, when_absent=DueStatus.OVERDUE)


def compute_tachograph_status(check_date, today: date | None = None) -> str:
    return _classify_document(check_date, today, when_absent=DueStatus.MISSING)


def compute_copie_conforma_status(expiry_date, today: date | None = None) -> str:
    return _classify_document(expiry_date, today, when_absent=DueStatus.MISSING)


def should_trigger_tachograph_reminder(check_date, lead_days: int = 30, today: date | None = None) -> bool:
    """True while today is inside [check_date - lead_days, check_date]."""
    target = _to_date(check_date)
    if target is None:
        return False
    current = _today(today)
    return target - timedelta(days=lead_days) <= current <= target
