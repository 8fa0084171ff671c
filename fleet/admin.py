"""
Fleet — Django Admin Configuration

@file fleet/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import OdometerLog, ServiceEvent, Vehicle
from .services import VehicleService

STATUS_COLORS = {'OK': '#22c55e', 'DUE_SOON': '#f59e0b', 'OVERDUE': '#dc2626'}


class ServiceEventInline(admin.TabularInline):
    model = ServiceEvent
    extra = 0
    fields = ('event_type', 'date', 'odometer_km', 'next_due_date', 'next_due_km', 'notes')
    show_change_link = True


class OdometerLogInline(admin.TabularInline):
    model = OdometerLog
    extra = 0
    fields = ('date', 'value_km', 'source', 'created_by')
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = (
        'license_plate', 'make', 'model', 'vehicle_type', 'status_badge',
        'organization', 'next_revision_date', 'insurance_end_date',
    )
    list_filter = ('status', 'vehicle_type', 'is_deleted')
    search_fields = ('license_plate', 'vin', 'make', 'model')
    readonly_fields = ('id', 'status', 'created_at', 'updated_at', 'created_by', 'updated_by')
    list_select_related = ('organization',)
    list_per_page = 30
    inlines = [ServiceEventInline, OdometerLogInline]

    @admin.display(description=_('Status'))
    def status_badge(self, obj):
        color = STATUS_COLORS.get(obj.status, '#6b7280')
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            color, obj.get_status_display(),
        )

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)
        # Dates and km edited here feed the stored status.
        VehicleService.recalculate_status(obj.pk, actor=request.user)
        obj.refresh_from_db(fields=['status'])
