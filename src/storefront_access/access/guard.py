from __future__ import annotations

from enum import Enum
from typing import Callable

from storefront_access.access.decision import AccessDecisionEngine
from storefront_access.access.permission_matrix import normalize_path
from storefront_access.access.role_resolution import RoleResolver
from storefront_access.access.roles import Role
from storefront_access.auth.models import Session
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.access import GuardSnapshot
from storefront_access.errors import ProfileUnavailable

log = get_logger(__name__)

STOREFRONT_ROOT = "/"
BACK_OFFICE_ROOT = "/dashboard"

CUSTOMER_DENIED_MESSAGE = "هذه الصفحة للمشرفين فقط، غير مصرح لك بالدخول"
DENIED_MESSAGE = "ليس لديك صلاحية للوصول إلى هذه الصفحة"


class GuardState(str, Enum):
    LOADING = "loading"
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


def redirect_target_for(role: Role | None) -> str:
    if role is None or role.is_customer_family:
        return STOREFRONT_ROOT
    return BACK_OFFICE_ROOT


def unauthorized_message_for(role: Role | None) -> str:
    if role is not None and role.is_customer_family:
        return CUSTOMER_DENIED_MESSAGE
    return DENIED_MESSAGE


class AccessGuard:
    """
    Session-scoped access state machine.

    LOADING is entered on every session change and left when role resolution
    completes; AUTHORIZED / UNAUTHORIZED are settled against the current path.
    A resolution that completes after the session identity changed is
    discarded. With redirects enabled the guard navigates at most once per
    session identity and target, and never to the path it is guarding.
    """

    def __init__(
        self,
        resolver: RoleResolver,
        engine: AccessDecisionEngine,
        path: str,
        *,
        navigate: Callable[[str], None] | None = None,
        redirect_on_unauthorized: bool = False,
    ):
        self._resolver = resolver
        self._engine = engine
        self._path = normalize_path(path)
        self._navigate = navigate
        self._redirect_enabled = redirect_on_unauthorized and navigate is not None

        self._state = GuardState.LOADING
        self._identity: str | None = None
        self._role: Role | None = None
        self._redirected: set[tuple[str | None, str]] = set()

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def role(self) -> Role | None:
        return self._role

    @property
    def path(self) -> str:
        return self._path

    async def on_session_change(self, session: Session | None) -> GuardSnapshot:
        identity = session.session_id if session else None
        self._identity = identity
        self._role = None
        self._state = GuardState.LOADING

        if session is None:
            self._settle(None)
            return self.snapshot()

        try:
            role: Role | None = await self._resolver.resolve(session)
        except ProfileUnavailable as e:
            log.info("guard.profile_unavailable session_id=%s reason=%s", identity, e.message)
            role = None

        if self._identity != identity:
            log.info("guard.stale_resolution_discarded session_id=%s current=%s", identity, self._identity)
            return self.snapshot()

        self._settle(role)
        return self.snapshot()

    def on_path_change(self, path: str) -> GuardSnapshot:
        self._path = normalize_path(path)
        if self._state is not GuardState.LOADING:
            self._settle(self._role)
        return self.snapshot()

    def _settle(self, role: Role | None) -> None:
        self._role = role
        if self._engine.is_allowed(role, self._path):
            self._state = GuardState.AUTHORIZED
            return

        self._state = GuardState.UNAUTHORIZED
        log.info(
            "guard.unauthorized session_id=%s role=%s path=%s",
            self._identity,
            role.value if role else None,
            self._path,
        )
        if self._redirect_enabled:
            self._redirect(self._redirect_target())

    def _redirect_target(self) -> str | None:
        """
        Where a denied principal should go, or None when going there would
        land on a page that denies them again. The storefront root is the
        landing page for signed-out visitors, so only the guarded path itself
        is excluded for them.
        """
        target = redirect_target_for(self._role)
        if target == self._path:
            return None
        if self._role is not None and not self._engine.is_allowed(self._role, target):
            return None
        return target

    def _redirect(self, target: str | None) -> None:
        key = (self._identity, target)
        if target is None or key in self._redirected:
            log.info("guard.redirect_suppressed session_id=%s target=%s", self._identity, target)
            return
        self._redirected.add(key)
        log.info("guard.redirect session_id=%s from=%s to=%s", self._identity, self._path, target)
        self._navigate(target)

    def snapshot(self) -> GuardSnapshot:
        unauthorized = self._state is GuardState.UNAUTHORIZED
        return GuardSnapshot(
            state=self._state.value,
            userRole=self._role.value if self._role else None,
            hasAccess=self._state is GuardState.AUTHORIZED,
            isLoading=self._state is GuardState.LOADING,
            unauthorizedMessage=unauthorized_message_for(self._role) if unauthorized else None,
            redirectTarget=self._redirect_target() if unauthorized else None,
        )
