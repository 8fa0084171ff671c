"""
FleetDesk — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

admin.site.site_header = 'FleetDesk Administration'
admin.site.site_title = 'FleetDesk'
admin.site.index_title = 'Fleet maintenance & inventory'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """FleetDesk API v1 — endpoint directory."""
    return Response({
        'auth': {
            'token': reverse('api-v1:token-obtain', request=request, format=format),
            'refresh': reverse('api-v1:token-refresh', request=request, format=format),
        },
        'vehicles': reverse('api-v1:fleet:vehicle-list', request=request, format=format),
        'oil': {
            'stock': reverse('api-v1:oil:stock-list', request=request, format=format),
            'movements': reverse('api-v1:oil:movement-list', request=request, format=format),
        },
        'tires': {
            'stock': reverse('api-v1:tires:stock-list', request=request, format=format),
            'movements': reverse('api-v1:tires:movement-list', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('vehicles/', include('fleet.urls', namespace='fleet')),
    path('oil/', include('oil.urls', namespace='oil')),
    path('tires/', include('tires.urls', namespace='tires')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
