"""
Tires — Views

Tire stock CRUD + adjust + per-stock history, and the tenant-wide
movement feed. DELETE on a movement undoes a MONTARE/DEMONTARE.
Mounting and removing tires is exposed on the vehicle resource
(fleet/views.py).

@file tires/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.pagination import clamp_limit
from organizations.mixins import OrganizationScopedMixin
from organizations.permissions import CanManageInventory

from .models import TireMovement, TireStock
from .serializers import (
    TireMovementReadSerializer,
    TireStockAdjustSerializer,
    TireStockReadSerializer,
    TireStockUpdateSerializer,
    TireStockWriteSerializer,
)
from .services import TireStockService


class TireStockViewSet(OrganizationScopedMixin, viewsets.ModelViewSet):
    """Tire stock rows of one organization. The balance is read-only here."""

    permission_classes = [IsAuthenticated, CanManageInventory]
    filterset_fields = ['brand', 'model', 'dimension', 'location']
    search_fields = ['brand', 'model', 'dimension', 'dot_code', 'location']
    ordering_fields = ['brand', 'model', 'dimension', 'quantity', 'updated_at']
    ordering = ['brand', 'model', 'dimension']

    def get_queryset(self):
        return TireStock.objects.filter(organization=self.get_organization())

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return TireStockReadSerializer
        if self.action in ('update', 'partial_update'):
            return TireStockUpdateSerializer
        if self.action == 'adjust':
            return TireStockAdjustSerializer
        if self.action == 'movements':
            return TireMovementReadSerializer
        return TireStockWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        stock = TireStockService.create_stock(
            organization_id=self.get_organization().pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(TireStockReadSerializer(stock).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        stock = TireStockService.update_stock(
            stock_id=self.get_object().pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(TireStockReadSerializer(stock).data)

    def destroy(self, request, *args, **kwargs):
        TireStockService.delete_stock(
            stock_id=self.get_object().pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='adjust')
    def adjust(self, request, pk=None):
        ser = TireStockAdjustSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        stock = TireStockService.adjust_stock(
            stock_id=pk,
            organization_id=self.get_organization().pk,
            actor=request.user,
            **ser.validated_data,
        )
        return Response(TireStockReadSerializer(stock).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='movements')
    def movements(self, request, pk=None):
        limit = clamp_limit(request.query_params.get('limit'))
        rows = TireStockService.list_stock_movements(pk, self.get_organization().pk, limit=limit)
        return Response(TireMovementReadSerializer(rows, many=True).data)


class TireMovementViewSet(
    OrganizationScopedMixin,
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Recent tire movements (?limit=, default 50, clamped to [1, 100])."""

    permission_classes = [IsAuthenticated, CanManageInventory]
    serializer_class = TireMovementReadSerializer
    pagination_class = None

    def get_queryset(self):
        return TireMovement.objects.filter(organization=self.get_organization())

    def list(self, request, *args, **kwargs):
        limit = clamp_limit(request.query_params.get('limit'))
        rows = TireStockService.list_recent_movements(self.get_organization().pk, limit=limit)
        return Response(self.get_serializer(rows, many=True).data)

    def destroy(self, request, *args, **kwargs):
        stock = TireStockService.delete_movement(
            movement_id=kwargs['pk'],
            organization_id=self.get_organization().pk,
            actor=request.user,
        )
        return Response(TireStockReadSerializer(stock).data, status=status.HTTP_200_OK)
