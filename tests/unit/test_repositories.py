from __future__ import annotations

import time

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from storefront_access.access.roles import Role
from storefront_access.configs.settings import Settings
from storefront_access.errors import ProfileUnavailable
from storefront_access.repositories.profile_repository import ProfileRepository
from storefront_access.repositories.role_cache import RoleCache
from storefront_access.repositories.tenant_repository import TenantRepository

from tests.fakes import FakeCollection, FakeDB


class BrokenCollection(FakeCollection):
    async def find_one(self, query, projection=None):
        raise ServerSelectionTimeoutError("no servers")


class FakeRedis:
    def __init__(self):
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = value
        self.ttls[key] = ex

    async def delete(self, key):
        self.values.pop(key, None)


@pytest.mark.asyncio
async def test_profile_repository_reads_role_fields() -> None:
    db = FakeDB()
    db["user_profiles"] = FakeCollection([{"_id": "u-1", "role": "موظف", "is_admin": None, "full_name": "x"}])

    profile = await ProfileRepository(db, Settings()).get_profile("u-1")

    assert profile.role == "موظف"
    assert profile.is_admin is False


@pytest.mark.asyncio
async def test_profile_repository_not_found() -> None:
    with pytest.raises(ProfileUnavailable):
        await ProfileRepository(FakeDB(), Settings()).get_profile("u-1")


@pytest.mark.asyncio
async def test_profile_repository_storage_error() -> None:
    db = FakeDB()
    db["user_profiles"] = BrokenCollection()
    with pytest.raises(ProfileUnavailable):
        await ProfileRepository(db, Settings()).get_profile("u-1")


@pytest.mark.asyncio
async def test_tenant_repository_lookups() -> None:
    db = FakeDB()
    db["tenants"] = FakeCollection(
        [{"_id": "t-1", "name": "Elmasry", "subdomain": "elmasry", "custom_domain": "shop.example.org"}]
    )
    repo = TenantRepository(db, Settings())

    assert (await repo.get_by_subdomain("elmasry")).id == "t-1"
    assert (await repo.get_by_custom_domain("shop.example.org")).name == "Elmasry"
    assert await repo.get_by_subdomain("ghost") is None


@pytest.mark.asyncio
async def test_role_cache_ttl_follows_session_expiry() -> None:
    client = FakeRedis()
    cache = RoleCache(client, Settings())

    await cache.set("s-1", Role.STAFF, expires_at=int(time.time()) + 600)
    await cache.set("s-2", Role.CUSTOMER)

    assert await cache.get("s-1") is Role.STAFF
    assert 0 < client.ttls["sa:role:s-1"] <= 600
    assert client.ttls["sa:role:s-2"] is None


@pytest.mark.asyncio
async def test_role_cache_skips_expired_sessions() -> None:
    client = FakeRedis()
    cache = RoleCache(client, Settings())

    await cache.set("s-1", Role.STAFF, expires_at=int(time.time()) - 1)

    assert await cache.get("s-1") is None


@pytest.mark.asyncio
async def test_role_cache_delete() -> None:
    client = FakeRedis()
    cache = RoleCache(client, Settings())
    await cache.set("s-1", Role.STAFF)

    await cache.delete("s-1")

    assert await cache.get("s-1") is None
