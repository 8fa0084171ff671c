"""
Oil — Views

DRF ViewSets for oil stock (CRUD + adjust + per-stock history), the
tenant-wide movement feed and usage recording. The organization comes
from ?org_id= or the body's org_id; balance changes only happen through
OilStockService.

@file oil/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.constants import FEED_MAX_LIMIT
from core.pagination import clamp_limit
from organizations.mixins import OrganizationScopedMixin
from organizations.permissions import CanManageInventory

from .models import OilMovement, OilStock
from .serializers import (
    OilMovementReadSerializer,
    OilStockAdjustSerializer,
    OilStockReadSerializer,
    OilStockUpdateSerializer,
    OilStockWriteSerializer,
    OilUsageSerializer,
)
from .services import OilStockService


class OilStockViewSet(OrganizationScopedMixin, viewsets.ModelViewSet):
    """
    Oil stock rows of one organization.

    The balance is read-only here: use the adjust action, or record usage
    on a vehicle, to move it.
    """

    permission_classes = [IsAuthenticated, CanManageInventory]
    filterset_fields = ['oil_type', 'brand', 'location']
    search_fields = ['oil_type', 'brand', 'location']
    ordering_fields = ['oil_type', 'brand', 'quantity', 'updated_at']
    ordering = ['oil_type', 'brand']

    def get_queryset(self):
        return OilStock.objects.filter(organization=self.get_organization())

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return OilStockReadSerializer
        if self.action in ('update', 'partial_update'):
            return OilStockUpdateSerializer
        if self.action == 'adjust':
            return OilStockAdjustSerializer
        if self.action == 'movements':
            return OilMovementReadSerializer
        return OilStockWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        stock = OilStockService.create_stock(
            organization_id=self.get_organization().pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(OilStockReadSerializer(stock).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        stock = OilStockService.update_stock(
            stock_id=self.get_object().pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(OilStockReadSerializer(stock).data)

    def destroy(self, request, *args, **kwargs):
        OilStockService.delete_stock(
            stock_id=self.get_object().pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='adjust')
    def adjust(self, request, pk=None):
        ser = OilStockAdjustSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        stock = OilStockService.adjust_stock(
            stock_id=pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(OilStockReadSerializer(stock).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='movements')
    def movements(self, request, pk=None):
        limit = clamp_limit(request.query_params.get('limit'))
        rows = OilStockService.list_stock_movements(pk, self.get_organization().pk, limit=limit)
        return Response(OilMovementReadSerializer(rows, many=True).data)


class OilMovementViewSet(OrganizationScopedMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """Tenant-wide oil movement feed, newest first (?limit=, clamped to [1, 100])."""

    permission_classes = [IsAuthenticated, CanManageInventory]
    serializer_class = OilMovementReadSerializer
    pagination_class = None

    def get_queryset(self):
        return OilMovement.objects.filter(organization=self.get_organization())

    def list(self, request, *args, **kwargs):
        limit = clamp_limit(request.query_params.get('limit'), default=FEED_MAX_LIMIT)
        rows = OilStockService.list_movements(self.get_organization().pk, limit=limit)
        return Response(self.get_serializer(rows, many=True).data)

    @action(detail=False, methods=['post'], url_path='use')
    def use(self, request):
        """Record oil consumed on a vehicle (UTILIZARE)."""
        ser = OilUsageSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        movement = OilStockService.record_usage(
            organization_id=self.get_organization().pk,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(OilMovementReadSerializer(movement).data, status=status.HTTP_201_CREATED)
