"""
Inventory — Abstract Ledger Models

Balance + movement ledger shared by every commodity. A StockItem holds
the current on-hand balance; each StockMovement records one change to it
as an unsigned quantity whose direction is implied by movement_type
(see inventory/services.py for the type -> direction tables).

Movements are INSERT ONLY at the model level: saving an existing row or
calling delete() on an instance raises. The one sanctioned removal path
is LedgerEngine.reverse_movement, which restores the balance in the same
transaction.

Concrete models add `quantity` (decimal liters, integer units), the
`stock` foreign key, `movement_type` choices and commodity fields.

@file inventory/models.py
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class StockItem(BaseModel):
    """Current balance of one commodity variant for one organization."""

    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='%(app_label)s_stock',
        verbose_name=_('organization'),
    )
    location = models.CharField(_('location'), max_length=100, null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def label(self) -> str:
        """Human name used in insufficient-stock messages."""
        raise NotImplementedError


class StockMovementBase(models.Model):
    """One immutable change to a StockItem balance."""

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='%(app_label)s_movements',
        verbose_name=_('organization'),
    )
    vehicle = models.ForeignKey(
        'fleet.Vehicle',
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='%(app_label)s_movements',
        verbose_name=_('vehicle'),
    )
    date = models.DateField(
        _('date'), help_text=_('Business date of the movement; may differ from created_at.'),
    )
    odometer_km = models.DecimalField(
        _('odometer (km)'), max_digits=12, decimal_places=2, null=True, blank=True,
    )
    notes = models.TextField(_('notes'), null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('created by'),
    )
    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    # No updated_at — immutable record.

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.movement_type} {self.quantity} stock={self.stock_id}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('Stock movements are insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError(
            'Stock movements cannot be deleted directly; use LedgerEngine.reverse_movement.',
        )
