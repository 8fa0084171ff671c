"""
Organizations — Models

Tenants and their members. Every stock row, movement and vehicle is
scoped to exactly one Organization.

@file organizations/models.py
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Organization(BaseModel):
    name = models.CharField(_('name'), max_length=200)

    class Meta:
        verbose_name = _('organization')
        verbose_name_plural = _('organizations')
        ordering = ['name']

    def __str__(self):
        return self.name


class Membership(BaseModel):
    """A user's role inside one organization."""

    class RoleChoices(models.TextChoices):
        OWNER = 'OWNER', _('Owner')
        ADMIN = 'ADMIN', _('Admin')
        MECHANIC = 'MECHANIC', _('Mechanic')
        VIEWER = 'VIEWER', _('Viewer')

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name='memberships',
        verbose_name=_('organization'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='memberships',
        verbose_name=_('user'),
    )
    role = models.CharField(
        _('role'), max_length=16,
        choices=RoleChoices.choices, default=RoleChoices.VIEWER,
    )

    class Meta:
        verbose_name = _('membership')
        verbose_name_plural = _('memberships')
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'user'], name='memberships_org_user_unique',
            ),
        ]

    def __str__(self):
        return f'{self.user_id} @ {self.organization_id} ({self.role})'
