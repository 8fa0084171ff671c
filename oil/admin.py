"""
Oil — Django Admin Configuration

Stock rows are editable except for the balance; movements are read-only
(insert-only ledger).

@file oil/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import OilMovement, OilStock


@admin.register(OilStock)
class OilStockAdmin(admin.ModelAdmin):
    list_display = ('oil_type', 'brand', 'quantity', 'location', 'organization', 'updated_at')
    list_filter = ('oil_type', 'brand')
    search_fields = ('oil_type', 'brand', 'location')
    readonly_fields = ('id', 'quantity', 'created_at', 'updated_at', 'created_by', 'updated_by')
    list_select_related = ('organization',)


@admin.register(OilMovement)
class OilMovementAdmin(admin.ModelAdmin):
    list_display = (
        'date', 'movement_type', 'quantity', 'stock', 'vehicle',
        'service_event', 'created_by', 'created_at',
    )
    list_filter = ('movement_type', 'date')
    search_fields = ('notes', 'vehicle__license_plate')
    readonly_fields = (
        'id', 'organization', 'stock', 'movement_type', 'quantity', 'date',
        'vehicle', 'service_event', 'odometer_km', 'notes', 'created_by', 'created_at',
    )
    list_select_related = ('stock', 'vehicle', 'created_by')
    date_hierarchy = 'date'
    ordering = ('-date', '-created_at')

    fieldsets = (
        (_('Movement'), {
            'fields': ('id', 'organization', 'stock', 'movement_type', 'quantity', 'date'),
        }),
        (_('Attribution'), {
            'fields': ('vehicle', 'service_event', 'odometer_km', 'notes'),
        }),
        (_('Audit'), {
            'fields': ('created_by', 'created_at'),
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
