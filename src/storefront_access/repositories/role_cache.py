from __future__ import annotations

import time

import redis.asyncio as redis

from storefront_access.access.roles import Role
from storefront_access.configs.settings import Settings
from storefront_access.configs.logging_config import get_logger

log = get_logger(__name__)


class RoleCache:
    """
    Resolved roles keyed by session identity.

    Entries are dropped on session-change events. A key only carries an
    expiry when the session token has one, so it never outlives its session.
    """

    def __init__(self, client: redis.Redis, settings: Settings):
        self._client = client
        self._prefix = settings.role_cache_prefix

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}:{session_id}"

    async def get(self, session_id: str) -> Role | None:
        value = await self._client.get(self._key(session_id))
        return Role.parse(value) if value else None

    async def set(self, session_id: str, role: Role, *, expires_at: int | None = None) -> None:
        ttl = None
        if expires_at is not None:
            ttl = int(expires_at - time.time())
            if ttl <= 0:
                return
        await self._client.set(self._key(session_id), role.value, ex=ttl)

    async def delete(self, session_id: str) -> None:
        log.info("role_cache.delete session_id=%s", session_id)
        await self._client.delete(self._key(session_id))
