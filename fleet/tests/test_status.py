"""
Tests — Status classifier (pure functions, pinned `today`).

@file fleet/tests/test_status.py
"""

from datetime import date, datetime, timedelta

import pytest

from fleet.status import (
    DueStatus,
    compute_copie_conforma_status,
    compute_insurance_status,
    compute_tachograph_status,
    compute_vehicle_status,
    should_trigger_tachograph_reminder,
)

TODAY = date(2026, 3, 10)


def _in(days):
    return TODAY + timedelta(days=days)


class TestVehicleStatus:

    def test_nothing_scheduled_is_ok(self):
        assert compute_vehicle_status(today=TODAY) == 'OK'

    def test_past_revision_date_is_overdue(self):
        assert compute_vehicle_status(next_revision_date=_in(-1), today=TODAY) == 'OVERDUE'

    @pytest.mark.parametrize('days', [0, 7, 14])
    def test_within_14_days_is_due_soon(self, days):
        assert compute_vehicle_status(next_revision_date=_in(days), today=TODAY) == 'DUE_SOON'

    def test_15_days_is_ok(self):
        assert compute_vehicle_status(next_revision_date=_in(15), today=TODAY) == 'OK'

    def test_km_past_is_overdue(self):
        status = compute_vehicle_status(
            next_revision_at_km=100000, current_odometer_km=100001, today=TODAY,
        )
        assert status == 'OVERDUE'

    def test_km_within_1000_is_due_soon(self):
        status = compute_vehicle_status(
            next_revision_at_km=101000, current_odometer_km=100000, today=TODAY,
        )
        assert status == 'DUE_SOON'

    def test_km_far_is_ok(self):
        status = compute_vehicle_status(
            next_revision_at_km=101001, current_odometer_km=100000, today=TODAY,
        )
        assert status == 'OK'

    def test_overdue_wins_over_due_soon(self):
        status = compute_vehicle_status(
            next_revision_date=_in(5),
            next_revision_at_km=99000,
            current_odometer_km=100000,
            today=TODAY,
        )
        assert status == 'OVERDUE'

    def test_iso_string_and_datetime_accepted(self):
        assert compute_vehicle_status(next_revision_date='2026-03-01', today=TODAY) == 'OVERDUE'
        assert compute_vehicle_status(
            next_revision_date=datetime(2026, 3, 20, 8, 30), today=TODAY,
        ) == 'DUE_SOON'

    def test_garbage_date_counts_as_absent(self):
        assert compute_vehicle_status(next_revision_date='not-a-date', today=TODAY) == 'OK'


class TestInsuranceStatus:

    def test_missing_is_expired(self):
        assert compute_insurance_status(None, today=TODAY) == DueStatus.OVERDUE

    def test_invalid_is_expired(self):
        assert compute_insurance_status('31/02/2026', today=TODAY) == DueStatus.OVERDUE

    def test_past_is_expired(self):
        assert compute_insurance_status(_in(-1), today=TODAY) == DueStatus.OVERDUE

    def test_within_30_days_is_expiring(self):
        assert compute_insurance_status(_in(30), today=TODAY) == DueStatus.SOON

    def test_far_is_ok(self):
        assert compute_insurance_status(_in(31), today=TODAY) == DueStatus.OK


class TestTruckDocuments:

    @pytest.mark.parametrize('classifier', [compute_tachograph_status, compute_copie_conforma_status])
    def test_missing(self, classifier):
        assert classifier(None, today=TODAY) == DueStatus.MISSING
        assert classifier('garbage', today=TODAY) == DueStatus.MISSING

    @pytest.mark.parametrize('classifier', [compute_tachograph_status, compute_copie_conforma_status])
    def test_ranges(self, classifier):
        assert classifier(_in(-1), today=TODAY) == DueStatus.OVERDUE
        assert classifier(_in(0), today=TODAY) == DueStatus.SOON
        assert classifier(_in(30), today=TODAY) == DueStatus.SOON
        assert classifier(_in(31), today=TODAY) == DueStatus.OK


class TestTachographReminder:

    def test_inside_window(self):
        assert should_trigger_tachograph_reminder(_in(30), today=TODAY) is True
        assert should_trigger_tachograph_reminder(_in(0), today=TODAY) is True

    def test_outside_window(self):
        assert should_trigger_tachograph_reminder(_in(31), today=TODAY) is False
        assert should_trigger_tachograph_reminder(_in(-1), today=TODAY) is False

    def test_custom_lead(self):
        assert should_trigger_tachograph_reminder(_in(10), lead_days=7, today=TODAY) is False
        assert should_trigger_tachograph_reminder(_in(7), lead_days=7, today=TODAY) is True

    def test_missing_never_triggers(self):
        assert should_trigger_tachograph_reminder(None, today=TODAY) is False
