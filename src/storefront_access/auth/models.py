from __future__ import annotations

from dataclasses import dataclass, replace

from storefront_access.access.roles import Role


@dataclass(frozen=True)
class Session:
    """An authenticated session as seen by the access core."""

    user_id: str
    # identity tag of a stable session; changes on sign-in and token refresh
    session_id: str
    tenant_id: str | None = None
    expires_at: int | None = None


@dataclass(frozen=True)
class Principal:
    user_id: str
    session_id: str
    tenant_id: str | None = None
    role: Role | None = None

    @classmethod
    def from_session(cls, session: Session) -> Principal:
        return cls(user_id=session.user_id, session_id=session.session_id, tenant_id=session.tenant_id)

    def with_tenant(self, tenant_id: str) -> Principal:
        return replace(self, tenant_id=tenant_id)
