from __future__ import annotations

import pytest

from storefront_access.access.role_resolution import RoleResolver, resolve_role
from storefront_access.access.roles import Role
from storefront_access.auth.models import Session
from storefront_access.domain.entities.profile import ProfileRecord
from storefront_access.errors import ProfileUnavailable

from tests.fakes import DownRoleCache, FakeRoleCache


@pytest.mark.parametrize(
    "role, is_admin, expected",
    [
        (None, True, Role.OWNER_ADMIN),
        (None, False, Role.CUSTOMER),
        ("staff", False, Role.STAFF),
        ("customer", True, Role.CUSTOMER),
        ("wholesale-customer", False, Role.WHOLESALE_CUSTOMER),
        ("موظف", False, Role.STAFF),
        ("أدمن رئيسي", False, Role.OWNER_ADMIN),
        ("manager", True, Role.OWNER_ADMIN),
        ("manager", False, Role.CUSTOMER),
        ("", False, Role.CUSTOMER),
    ],
)
def test_resolve_role(role, is_admin, expected) -> None:
    assert resolve_role(ProfileRecord(role=role, is_admin=is_admin)) is expected


@pytest.mark.asyncio
async def test_resolver_caches_within_session(profiles) -> None:
    resolver = RoleResolver(profiles, FakeRoleCache())
    session = Session(user_id="u-staff", session_id="s-1")

    assert await resolver.resolve(session) is Role.STAFF
    assert await resolver.resolve(session) is Role.STAFF
    assert profiles.calls == ["u-staff"]


@pytest.mark.asyncio
async def test_new_session_identity_refetches(profiles) -> None:
    resolver = RoleResolver(profiles, FakeRoleCache())
    await resolver.resolve(Session(user_id="u-staff", session_id="s-1"))
    profiles.profiles["u-staff"] = ProfileRecord(role="customer")

    assert await resolver.resolve(Session(user_id="u-staff", session_id="s-2")) is Role.CUSTOMER
    assert profiles.calls == ["u-staff", "u-staff"]


@pytest.mark.asyncio
async def test_invalidate_drops_cached_role(profiles) -> None:
    cache = FakeRoleCache()
    resolver = RoleResolver(profiles, cache)
    session = Session(user_id="u-staff", session_id="s-1")
    await resolver.resolve(session)

    await resolver.invalidate(session)

    assert "s-1" not in cache.entries
    await resolver.resolve(session)
    assert len(profiles.calls) == 2


@pytest.mark.asyncio
async def test_unavailable_profile_is_not_cached(profiles) -> None:
    cache = FakeRoleCache()
    resolver = RoleResolver(profiles, cache)
    session = Session(user_id="u-missing", session_id="s-1")

    with pytest.raises(ProfileUnavailable):
        await resolver.resolve(session)
    assert cache.entries == {}


@pytest.mark.asyncio
async def test_resolver_without_cache_always_fetches(profiles) -> None:
    resolver = RoleResolver(profiles)
    session = Session(user_id="u-legacy-admin", session_id="s-1")

    assert await resolver.resolve(session) is Role.OWNER_ADMIN
    assert await resolver.resolve(session) is Role.OWNER_ADMIN
    assert len(profiles.calls) == 2


@pytest.mark.asyncio
async def test_cache_outage_falls_back_to_profile_store(profiles) -> None:
    resolver = RoleResolver(profiles, DownRoleCache())
    session = Session(user_id="u-staff", session_id="s-1")

    assert await resolver.resolve(session) is Role.STAFF
    assert await resolver.resolve(session) is Role.STAFF
    assert profiles.calls == ["u-staff", "u-staff"]


@pytest.mark.asyncio
async def test_invalidate_survives_cache_outage(profiles) -> None:
    resolver = RoleResolver(profiles, DownRoleCache())
    await resolver.invalidate(Session(user_id="u-staff", session_id="s-1"))
