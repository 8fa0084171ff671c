"""
Organizations — View Mixins

@file organizations/mixins.py
"""

from .services import OrganizationService


class OrganizationScopedMixin:
    """
    Resolves the tenant once per request from ?org_id= or the body's
    org_id field.
    """

    def get_organization(self):
        if not hasattr(self, '_organization'):
            request = self.request
            org_id = request.query_params.get('org_id')
            if not org_id and isinstance(request.data, dict):
                org_id = request.data.get('org_id')
            self._organization = OrganizationService.resolve(request.user, org_id)
        return self._organization
