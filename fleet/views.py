"""
Fleet — Views

Read-only vehicle resource with the per-vehicle actions: oil usage
history, mounted tires, mount/unmount and tire history, service events
and odometer readings. Plus the status recalculation trigger and the
organization dashboard.

@file fleet/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.pagination import clamp_limit
from oil.serializers import OilMovementReadSerializer
from oil.services import OilStockService
from organizations.mixins import OrganizationScopedMixin
from organizations.permissions import CanManageInventory
from tires.serializers import TireMountSerializer, TireMovementReadSerializer
from tires.services import TireStockService

from .models import Vehicle
from .serializers import (
    OdometerLogCreateSerializer,
    OdometerLogSerializer,
    ServiceEventCreateSerializer,
    ServiceEventSerializer,
    VehicleSerializer,
)
from .services import VehicleService


class VehicleViewSet(OrganizationScopedMixin, viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, CanManageInventory]
    serializer_class = VehicleSerializer
    filterset_fields = ['vehicle_type', 'status']
    search_fields = ['license_plate', 'make', 'model', 'vin']
    ordering_fields = ['license_plate', 'next_revision_date', 'insurance_end_date', 'status']
    ordering = ['license_plate']

    def get_queryset(self):
        return Vehicle.objects.filter(organization=self.get_organization(), is_deleted=False)

    def _vehicle(self, pk) -> Vehicle:
        return VehicleService.get_vehicle(pk, self.get_organization().pk)

    @action(detail=True, methods=['get'], url_path='oil-usage')
    def oil_usage(self, request, pk=None):
        vehicle = self._vehicle(pk)
        limit = clamp_limit(request.query_params.get('limit'), default=10)
        rows = OilStockService.list_vehicle_usage(vehicle.pk, vehicle.organization_id, limit=limit)
        return Response(OilMovementReadSerializer(rows, many=True).data)

    @action(detail=True, methods=['get'], url_path='tires')
    def tires(self, request, pk=None):
        """Tires currently mounted on this vehicle."""
        vehicle = self._vehicle(pk)
        rows = TireStockService.get_mounted_tires(vehicle.pk, vehicle.organization_id)
        return Response(TireMovementReadSerializer(rows, many=True).data)

    def _mount(self, request, pk, operation):
        vehicle = self._vehicle(pk)
        ser = TireMountSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        movement = operation(
            organization_id=vehicle.organization_id,
            vehicle_id=vehicle.pk,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(TireMovementReadSerializer(movement).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='tires/mount')
    def mount_tires(self, request, pk=None):
        return self._mount(request, pk, TireStockService.mount_tires)

    @action(detail=True, methods=['post'], url_path='tires/unmount')
    def unmount_tires(self, request, pk=None):
        return self._mount(request, pk, TireStockService.unmount_tires)

    @action(detail=True, methods=['get'], url_path='tire-movements')
    def tire_movements(self, request, pk=None):
        vehicle = self._vehicle(pk)
        limit = clamp_limit(request.query_params.get('limit'))
        rows = TireStockService.list_vehicle_movements(vehicle.pk, vehicle.organization_id, limit=limit)
        return Response(TireMovementReadSerializer(rows, many=True).data)

    @action(detail=True, methods=['get', 'post'], url_path='service-events')
    def service_events(self, request, pk=None):
        vehicle = self._vehicle(pk)
        if request.method == 'GET':
            rows = VehicleService.list_service_events(vehicle.pk, vehicle.organization_id)
            return Response(ServiceEventSerializer(rows, many=True).data)
        ser = ServiceEventCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        event = VehicleService.record_service_event(
            vehicle_id=vehicle.pk,
            organization_id=vehicle.organization_id,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(ServiceEventSerializer(event).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'service-events/(?P<event_pk>[^/.]+)')
    def delete_service_event(self, request, pk=None, event_pk=None):
        vehicle = self._vehicle(pk)
        VehicleService.delete_service_event(
            event_id=event_pk,
            vehicle_id=vehicle.pk,
            organization_id=vehicle.organization_id,
            actor=request.user,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get', 'post'], url_path='odometer-logs')
    def odometer_logs(self, request, pk=None):
        vehicle = self._vehicle(pk)
        if request.method == 'GET':
            rows = VehicleService.list_odometer_logs(vehicle.pk, vehicle.organization_id)
            return Response(OdometerLogSerializer(rows, many=True).data)
        ser = OdometerLogCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        log = VehicleService.record_odometer(
            vehicle_id=vehicle.pk,
            organization_id=vehicle.organization_id,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(OdometerLogSerializer(log).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='recalculate-status')
    def recalculate_status(self, request, pk=None):
        vehicle = self._vehicle(pk)
        vehicle = VehicleService.recalculate_status(vehicle.pk, actor=request.user)
        return Response(VehicleSerializer(vehicle).data)

    @action(detail=False, methods=['get'], url_path='dashboard')
    def dashboard(self, request):
        return Response(VehicleService.dashboard_summary(self.get_organization().pk))
