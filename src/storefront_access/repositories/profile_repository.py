from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from storefront_access.configs.settings import Settings
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.profile import ProfileRecord
from storefront_access.errors import ProfileUnavailable

log = get_logger(__name__)


class ProfileRepository:
    """Read-only access to the storefront's `user_profiles` collection."""

    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db[settings.profiles_collection]

    async def get_profile(self, principal_id: str) -> ProfileRecord:
        log.info("repo.profile.get principal_id=%s", principal_id)
        try:
            doc = await self._col.find_one(
                {"_id": principal_id},
                projection={"role": 1, "is_admin": 1},
            )
        except PyMongoError as e:
            log.warning("repo.profile.get failed principal_id=%s error=%s", principal_id, e)
            raise ProfileUnavailable(principal_id, reason="storage error") from e
        if not doc:
            log.info("repo.profile.get not_found principal_id=%s", principal_id)
            raise ProfileUnavailable(principal_id)
        return ProfileRecord(
            id=str(doc.get("_id")),
            role=doc.get("role"),
            is_admin=bool(doc.get("is_admin") or False),
        )
