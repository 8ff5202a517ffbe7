from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront_access.configs.settings import Settings
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.tenant import Tenant

log = get_logger(__name__)


class TenantRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db[settings.tenants_collection]

    async def ensure_indexes(self) -> None:
        log.info("repo.tenant.ensure_indexes start")
        await self._col.create_index([("subdomain", 1)], unique=True)
        await self._col.create_index([("custom_domain", 1)], unique=True, sparse=True)
        log.info("repo.tenant.ensure_indexes done")

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        log.info("repo.tenant.get_by_subdomain subdomain=%s", subdomain)
        doc = await self._col.find_one({"subdomain": subdomain})
        return _to_tenant(doc)

    async def get_by_custom_domain(self, domain: str) -> Tenant | None:
        log.info("repo.tenant.get_by_custom_domain domain=%s", domain)
        doc = await self._col.find_one({"custom_domain": domain})
        return _to_tenant(doc)


def _to_tenant(doc: dict[str, Any] | None) -> Tenant | None:
    if not doc:
        return None
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    return Tenant(**data)
