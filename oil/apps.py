"""
Oil — Application Configuration
"""

from django.apps import AppConfig


class OilConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'oil'
    verbose_name = 'Oil Inventory'
