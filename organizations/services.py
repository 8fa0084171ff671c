"""
Organizations — Service Layer

Tenant resolution. Callers always pass the organization explicitly; an
organization the user does not belong to is reported as not found so
that its existence is never confirmed.

@file organizations/services.py
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import BusinessRuleViolation, ResourceNotFoundError

from .models import Membership, Organization

logger = logging.getLogger('fleetdesk')

WRITE_ROLES = {
    Membership.RoleChoices.OWNER,
    Membership.RoleChoices.ADMIN,
    Membership.RoleChoices.MECHANIC,
}


class OrganizationService:

    @staticmethod
    def resolve(user, org_id=None) -> Organization:
        """
        Return the organization `user` may act on.

        Without org_id, a user with exactly one membership gets that
        organization; anything else must name the organization.
        """
        if org_id in (None, ''):
            memberships = list(
                Membership.objects.filter(user=user).select_related('organization')[:2],
            )
            if len(memberships) == 1:
                return memberships[0].organization
            raise BusinessRuleViolation(detail='org_id is required.')

        try:
            org_uuid = UUID(str(org_id))
        except ValueError:
            raise ResourceNotFoundError(detail='Organization not found.')

        qs = Organization.objects.filter(pk=org_uuid)
        if not user.is_superuser:
            qs = qs.filter(memberships__user=user)
        try:
            return qs.get()
        except (Organization.DoesNotExist, DjangoValidationError):
            logger.info('Organization %s not visible to user %s.', org_id, user.pk)
            raise ResourceNotFoundError(detail='Organization not found.')

    @staticmethod
    def get_role(user, organization) -> str | None:
        if user.is_superuser:
            return Membership.RoleChoices.OWNER
        return (
            Membership.objects
            .filter(user=user, organization=organization)
            .values_list('role', flat=True)
            .first()
        )

    @staticmethod
    def can_write(user, organization) -> bool:
        return OrganizationService.get_role(user, organization) in WRITE_ROLES
