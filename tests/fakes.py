"""In-memory stand-ins for the Mongo collections and Redis cache used in tests."""
from __future__ import annotations

import asyncio
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront_access.access.roles import Role
from storefront_access.domain.entities.profile import ProfileRecord
from storefront_access.domain.entities.tenant import Tenant
from storefront_access.errors import ProfileUnavailable


class FakeCollection:
    """Just enough of an AsyncIOMotorCollection for the repositories under test."""

    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self.docs: dict[Any, dict[str, Any]] = {d["_id"]: dict(d) for d in docs or []}
        self.writes = 0

    @staticmethod
    def _match(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in query.items())

    async def find_one(self, query, projection=None):
        for doc in self.docs.values():
            if self._match(doc, query):
                return dict(doc)
        return None

    async def find_one_and_update(self, query, update, upsert=False, return_document=ReturnDocument.BEFORE):
        existing = await self.find_one(query)
        if existing is not None:
            return existing if return_document == ReturnDocument.BEFORE else dict(self.docs[existing["_id"]])
        if not upsert:
            return None
        doc = dict(query)
        doc.update(update.get("$setOnInsert", {}))
        doc.update(update.get("$set", {}))
        self.docs[doc["_id"]] = doc
        self.writes += 1
        return None if return_document == ReturnDocument.BEFORE else dict(doc)

    async def create_index(self, *args, **kwargs):
        return "idx"


class RacingCollection(FakeCollection):
    """Another first login wins the upsert just before ours lands."""

    def __init__(self, winner: dict[str, Any]):
        super().__init__()
        self._winner = winner

    async def find_one_and_update(self, query, update, upsert=False, return_document=ReturnDocument.BEFORE):
        self.docs[self._winner["_id"]] = dict(self._winner)
        raise DuplicateKeyError("E11000 duplicate key error")


class FakeDB(dict):
    def __missing__(self, name):
        col = FakeCollection()
        self[name] = col
        return col


class FakeProfiles:
    def __init__(self, profiles: dict[str, ProfileRecord] | None = None):
        self.profiles = dict(profiles or {})
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def get_profile(self, principal_id: str) -> ProfileRecord:
        self.calls.append(principal_id)
        gate = self.gates.get(principal_id)
        if gate is not None:
            await gate.wait()
        if principal_id not in self.profiles:
            raise ProfileUnavailable(principal_id)
        return self.profiles[principal_id]


class FakeRoleCache:
    def __init__(self):
        self.entries: dict[str, Role] = {}

    async def get(self, session_id: str) -> Role | None:
        return self.entries.get(session_id)

    async def set(self, session_id: str, role: Role, *, expires_at: int | None = None) -> None:
        self.entries[session_id] = role

    async def delete(self, session_id: str) -> None:
        self.entries.pop(session_id, None)


class DownRoleCache:
    """A role cache whose Redis connection is gone."""

    async def get(self, session_id: str) -> Role | None:
        raise RedisConnectionError("redis down")

    async def set(self, session_id: str, role: Role, *, expires_at: int | None = None) -> None:
        raise RedisConnectionError("redis down")

    async def delete(self, session_id: str) -> None:
        raise RedisConnectionError("redis down")


class FakeTenants:
    def __init__(self, tenants: list[Tenant]):
        self.tenants = list(tenants)
        self.lookups: list[str] = []

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        self.lookups.append(subdomain)
        return next((t for t in self.tenants if t.subdomain == subdomain), None)

    async def get_by_custom_domain(self, domain: str) -> Tenant | None:
        self.lookups.append(domain)
        return next((t for t in self.tenants if t.custom_domain == domain), None)


