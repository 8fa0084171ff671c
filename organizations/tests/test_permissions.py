"""
Tests — Organization scoping through the API: members read, writers
write, viewers are read-only, outsiders see 404.

@file organizations/tests/test_permissions.py
"""

import pytest
from django.urls import reverse

from organizations.models import Membership
from tests.factories import MembershipFactory, OilStockFactory, OrganizationFactory


pytestmark = pytest.mark.django_db

URL = 'api-v1:oil:stock-list'


class TestOrganizationScoping:

    def test_requires_auth(self, api_client, organization):
        resp = api_client.get(reverse(URL), {'org_id': str(organization.pk)})
        assert resp.status_code == 401

    def test_member_lists_only_own_org(self, member_client, organization):
        OilStockFactory(organization=organization)
        OilStockFactory(organization=OrganizationFactory())
        resp = member_client.get(reverse(URL), {'org_id': str(organization.pk)})
        assert resp.status_code == 200
        assert len(resp.data['results']) == 1

    def test_outsider_gets_404(self, authenticated_client, member):
        other = OrganizationFactory()
        resp = authenticated_client.get(reverse(URL), {'org_id': str(other.pk)})
        assert resp.status_code == 404
        assert resp.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_viewer_cannot_write(self, api_client, organization):
        viewer = MembershipFactory(organization=organization, role=Membership.RoleChoices.VIEWER)
        api_client.force_authenticate(user=viewer.user)
        resp = api_client.post(
            f'{reverse(URL)}?org_id={organization.pk}',
            {'oil_type': '5W30', 'brand': 'Castrol'},
            format='json',
        )
        assert resp.status_code == 403

    def test_viewer_can_read(self, api_client, organization):
        viewer = MembershipFactory(organization=organization, role=Membership.RoleChoices.VIEWER)
        api_client.force_authenticate(user=viewer.user)
        resp = api_client.get(reverse(URL), {'org_id': str(organization.pk)})
        assert resp.status_code == 200

    def test_org_id_in_body(self, member_client, organization):
        resp = member_client.post(
            reverse(URL),
            {'org_id': str(organization.pk), 'oil_type': '5W30', 'brand': 'Castrol'},
            format='json',
        )
        assert resp.status_code == 201
