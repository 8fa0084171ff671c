"""
Oil — Models

Liquid inventory in liters (2 decimal places). Movement types:
INTRARE (inbound), IESIRE (outbound write-off), UTILIZARE (outbound,
consumed on a vehicle, optionally during a service event).

@file oil/models.py
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from inventory.models import StockItem, StockMovementBase


class OilStock(StockItem):
    oil_type = models.CharField(_('oil type'), max_length=100, help_text=_('e.g. 5W-30'))
    brand = models.CharField(_('brand'), max_length=100)
    quantity = models.DecimalField(
        _('quantity (liters)'), max_digits=10, decimal_places=2, default=0,
    )

    class Meta:
        verbose_name = _('oil stock')
        verbose_name_plural = _('oil stock')
        ordering = ['oil_type', 'brand']
        indexes = [
            models.Index(fields=['organization', 'oil_type', 'brand'], name='oil_stock_org_type_brand_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0), name='oil_stocks_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.label} ({self.quantity} L)'

    @property
    def label(self) -> str:
        return f'{self.oil_type} {self.brand}'


class OilMovement(StockMovementBase):

    class MovementType(models.TextChoices):
        INTRARE = 'INTRARE', _('Stock in')
        IESIRE = 'IESIRE', _('Stock out')
        UTILIZARE = 'UTILIZARE', _('Used on vehicle')

    stock = models.ForeignKey(
        OilStock,
        on_delete=models.CASCADE,
        related_name='movements',
        verbose_name=_('stock'),
    )
    movement_type = models.CharField(
        _('movement type'), max_length=16,
        choices=MovementType.choices, db_index=True,
    )
    quantity = models.DecimalField(
        _('quantity (liters)'), max_digits=10, decimal_places=2,
        help_text=_('Always positive; direction comes from movement_type.'),
    )
    service_event = models.ForeignKey(
        'fleet.ServiceEvent',
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='oil_movements',
        verbose_name=_('service event'),
    )

    class Meta(StockMovementBase.Meta):
        verbose_name = _('oil movement')
        verbose_name_plural = _('oil movements')
        indexes = [
            models.Index(fields=['stock', 'date'], name='oil_mov_stock_date_idx'),
            models.Index(fields=['vehicle', 'date'], name='oil_mov_vehicle_date_idx'),
            models.Index(fields=['organization', 'date'], name='oil_mov_org_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name='oil_movements_quantity_positive'),
        ]
