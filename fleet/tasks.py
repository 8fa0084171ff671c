"""
Fleet — Celery Tasks

Date-based vehicle statuses drift as days pass without any write, so
besides the recalculation done by service events, odometer readings and
admin edits, the stored status is refreshed on a schedule.

@file fleet/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('fleetdesk')


@shared_task(name='fleet.refresh_vehicle_statuses')
def refresh_vehicle_statuses_task():
    """
    Daily task: recalculate Vehicle.status for every live vehicle.
    Registered with Celery Beat to run once per day shortly after midnight.
    """
    from .services import VehicleService

    count = VehicleService.refresh_all_statuses()
    logger.info('refresh_vehicle_statuses_task completed: %d vehicles changed.', count)
    return {'changed_count': count}
