"""
Oil — URL Configuration

@file oil/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import OilMovementViewSet, OilStockViewSet

app_name = 'oil'

router = DefaultRouter()
router.register('stock', OilStockViewSet, basename='stock')
router.register('movements', OilMovementViewSet, basename='movement')

urlpatterns = [
    path('', include(router.urls)),
]
