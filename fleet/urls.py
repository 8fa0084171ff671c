"""
Fleet — URL Configuration

@file fleet/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import VehicleViewSet

app_name = 'fleet'

router = SimpleRouter()
router.register('', VehicleViewSet, basename='vehicle')

urlpatterns = [
    path('', include(router.urls)),
]
