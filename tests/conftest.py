from __future__ import annotations

import pytest

from storefront_access.domain.entities.profile import ProfileRecord
from storefront_access.domain.entities.tenant import Tenant

from tests.fakes import FakeProfiles, FakeTenants


@pytest.fixture
def profiles() -> FakeProfiles:
    return FakeProfiles(
        {
            "u-customer": ProfileRecord(role="customer", is_admin=False),
            "u-wholesale": ProfileRecord(role="جملة", is_admin=False),
            "u-staff": ProfileRecord(role="staff", is_admin=False),
            "u-legacy-admin": ProfileRecord(role=None, is_admin=True),
        }
    )


@pytest.fixture
def tenants() -> FakeTenants:
    return FakeTenants(
        [
            Tenant(id="t-elmasry", name="Elmasry", subdomain="elmasry"),
            Tenant(id="t-closed", name="Closed", subdomain="closed", is_active=False),
            Tenant(
                id="t-custom",
                name="Custom",
                subdomain="custom",
                custom_domain="shop.example.org",
                domain_verified=True,
                domain_type="custom",
            ),
        ]
    )
