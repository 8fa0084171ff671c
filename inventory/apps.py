"""
Inventory — Application Configuration

Holds the abstract ledger models and the LedgerEngine shared by the oil
and tire apps; it defines no tables of its own.
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
    verbose_name = 'Inventory Ledger'
