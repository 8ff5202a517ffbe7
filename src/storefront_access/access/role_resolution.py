from __future__ import annotations

from typing import Protocol

from redis.exceptions import RedisError

from storefront_access.access.roles import ADMIN_ROLE, DEFAULT_ROLE, Role
from storefront_access.auth.models import Session
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.profile import ProfileRecord

log = get_logger(__name__)


# redis client errors, plus socket-level failures from other cache backends
CACHE_ERRORS = (RedisError, OSError)


class ProfileStore(Protocol):
    async def get_profile(self, principal_id: str) -> ProfileRecord: ...


class RoleStore(Protocol):
    async def get(self, session_id: str) -> Role | None: ...

    async def set(self, session_id: str, role: Role, *, expires_at: int | None = None) -> None: ...

    async def delete(self, session_id: str) -> None: ...


def resolve_role(profile: ProfileRecord) -> Role:
    """Explicit role field wins; legacy records fall back to the admin flag."""
    role = Role.parse(profile.role)
    if role is not None:
        return role
    return ADMIN_ROLE if profile.is_admin else DEFAULT_ROLE


class RoleResolver:
    """
    Resolves the role of a session's principal.

    Results are cached per session identity only. `ProfileUnavailable` from
    the store propagates and is never cached. The cache is best effort: a
    failing read counts as a miss, a failing write or delete is logged.
    """

    def __init__(self, profiles: ProfileStore, cache: RoleStore | None = None):
        self._profiles = profiles
        self._cache = cache

    async def resolve(self, session: Session) -> Role:
        if self._cache is not None:
            try:
                cached = await self._cache.get(session.session_id)
            except CACHE_ERRORS as e:
                log.warning("role.cache_get_failed session_id=%s error=%s", session.session_id, e)
                cached = None
            if cached is not None:
                log.debug("role.cache_hit session_id=%s role=%s", session.session_id, cached.value)
                return cached

        profile = await self._profiles.get_profile(session.user_id)
        role = resolve_role(profile)
        log.info(
            "role.resolved user_id=%s session_id=%s role=%s explicit=%s",
            session.user_id,
            session.session_id,
            role.value,
            Role.parse(profile.role) is not None,
        )
        if self._cache is not None:
            try:
                await self._cache.set(session.session_id, role, expires_at=session.expires_at)
            except CACHE_ERRORS as e:
                log.warning("role.cache_set_failed session_id=%s error=%s", session.session_id, e)
        return role

    async def invalidate(self, session: Session) -> None:
        if self._cache is not None:
            try:
                await self._cache.delete(session.session_id)
            except CACHE_ERRORS as e:
                log.warning("role.cache_delete_failed session_id=%s error=%s", session.session_id, e)
