from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from storefront_access.configs.settings import Settings
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.tenant import TenantBinding
from storefront_access.utils.time_utils import utc_now

log = get_logger(__name__)


class BindingRepository:
    """
    `tenant_bindings` documents are keyed by principal id, so the unique
    `_id` index is what serializes concurrent first logins.
    """

    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db[settings.bindings_collection]

    async def bind_if_absent(
        self, *, principal_id: str, tenant_id: str, role: str
    ) -> tuple[TenantBinding, bool]:
        """
        Insert the binding unless one exists. Returns the stored binding and
        whether this call created it. One atomic findOneAndUpdate.
        """
        log.info(
            "repo.binding.bind_if_absent principal_id=%s tenant_id=%s role=%s",
            principal_id,
            tenant_id,
            role,
        )
        now = utc_now()
        try:
            before = await self._col.find_one_and_update(
                {"_id": principal_id},
                {"$setOnInsert": {"tenant_id": tenant_id, "role": role, "created_at": now}},
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        except DuplicateKeyError:
            # lost an upsert race; the winner's document is authoritative
            log.info("repo.binding.upsert_race principal_id=%s", principal_id)
            before = await self._col.find_one({"_id": principal_id})
            if before is None:
                raise

        if before is None:
            return (
                TenantBinding(principal_id=principal_id, tenant_id=tenant_id, role=role, created_at=now),
                True,
            )
        return _to_binding(before), False


def _to_binding(doc: dict[str, Any]) -> TenantBinding:
    return TenantBinding(
        principal_id=str(doc["_id"]),
        tenant_id=str(doc["tenant_id"]),
        role=doc.get("role") or "customer",
        created_at=doc.get("created_at"),
    )
