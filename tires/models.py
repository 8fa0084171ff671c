"""
Tires — Models

Countable inventory. Movement types: INTRARE (inbound), IESIRE
(outbound), MONTARE (outbound, installed on a vehicle) and DEMONTARE
(inbound, removed from a vehicle back to stock). What is currently
mounted on a vehicle is derived from MONTARE/DEMONTARE rows, never
stored separately.

@file tires/models.py
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from inventory.models import StockItem, StockMovementBase


class TireStock(StockItem):
    brand = models.CharField(_('brand'), max_length=100)
    model = models.CharField(_('model'), max_length=100)
    dimension = models.CharField(_('dimension'), max_length=50, help_text=_('e.g. 315/80R22.5'))
    dot_code = models.CharField(_('DOT code'), max_length=20)
    quantity = models.PositiveIntegerField(_('quantity'), default=0)

    class Meta:
        verbose_name = _('tire stock')
        verbose_name_plural = _('tire stock')
        ordering = ['brand', 'model', 'dimension']
        indexes = [
            models.Index(
                fields=['organization', 'brand', 'model', 'dimension'],
                name='tire_stock_org_brand_dim_idx',
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0), name='tire_stocks_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.label} x{self.quantity}'

    @property
    def label(self) -> str:
        return f'{self.brand} {self.model} {self.dimension}'


class TireMovement(StockMovementBase):

    class MovementType(models.TextChoices):
        INTRARE = 'INTRARE', _('Stock in')
        IESIRE = 'IESIRE', _('Stock out')
        MONTARE = 'MONTARE', _('Mounted on vehicle')
        DEMONTARE = 'DEMONTARE', _('Removed from vehicle')

    stock = models.ForeignKey(
        TireStock,
        on_delete=models.CASCADE,
        related_name='movements',
        verbose_name=_('stock'),
    )
    movement_type = models.CharField(
        _('movement type'), max_length=16,
        choices=MovementType.choices, db_index=True,
    )
    quantity = models.PositiveIntegerField(
        _('quantity'), help_text=_('Always positive; direction comes from movement_type.'),
    )
    driver_name = models.CharField(_('driver name'), max_length=100, null=True, blank=True)

    class Meta(StockMovementBase.Meta):
        verbose_name = _('tire movement')
        verbose_name_plural = _('tire movements')
        indexes = [
            models.Index(fields=['stock', 'date'], name='tire_mov_stock_date_idx'),
            models.Index(fields=['vehicle', 'date'], name='tire_mov_vehicle_date_idx'),
            models.Index(fields=['organization', 'date'], name='tire_mov_org_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name='tire_movements_quantity_positive'),
        ]
