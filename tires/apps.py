"""
Tires — Application Configuration
"""

from django.apps import AppConfig


class TiresConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tires'
    verbose_name = 'Tire Inventory'
