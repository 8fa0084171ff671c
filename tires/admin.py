"""
Tires — Django Admin Configuration

@file tires/admin.py
"""

from django.contrib import admin

from .models import TireMovement, TireStock


@admin.register(TireStock)
class TireStockAdmin(admin.ModelAdmin):
    list_display = ('brand', 'model', 'dimension', 'dot_code', 'quantity', 'location', 'organization')
    list_filter = ('brand', 'dimension')
    search_fields = ('brand', 'model', 'dimension', 'dot_code', 'location')
    readonly_fields = ('id', 'quantity', 'created_at', 'updated_at', 'created_by', 'updated_by')
    list_select_related = ('organization',)


@admin.register(TireMovement)
class TireMovementAdmin(admin.ModelAdmin):
    list_display = (
        'date', 'movement_type', 'quantity', 'stock', 'vehicle',
        'driver_name', 'created_by', 'created_at',
    )
    list_filter = ('movement_type', 'date')
    search_fields = ('notes', 'driver_name', 'vehicle__license_plate')
    readonly_fields = (
        'id', 'organization', 'stock', 'movement_type', 'quantity', 'date',
        'vehicle', 'odometer_km', 'driver_name', 'notes', 'created_by', 'created_at',
    )
    list_select_related = ('stock', 'vehicle', 'created_by')
    date_hierarchy = 'date'
    ordering = ('-date', '-created_at')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
