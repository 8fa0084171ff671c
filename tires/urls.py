"""
Tires — URL Configuration

@file tires/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import TireMovementViewSet, TireStockViewSet

app_name = 'tires'

router = DefaultRouter()
router.register('stock', TireStockViewSet, basename='stock')
router.register('movements', TireMovementViewSet, basename='movement')

urlpatterns = [
    path('', include(router.urls)),
]
