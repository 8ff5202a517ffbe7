from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from storefront_access.access.decision import AccessDecisionEngine
from storefront_access.access.guard import AccessGuard
from storefront_access.access.role_resolution import RoleResolver
from storefront_access.auth.dependencies import get_optional_session, get_session
from storefront_access.auth.models import Session
from storefront_access.domain.entities.access import AccessCheckRequest
from storefront_access.utils.response import success
from storefront_access.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/access", tags=["access"])


def _engine(request: Request) -> AccessDecisionEngine:
    return request.app.state.access_engine


def _resolver(request: Request) -> RoleResolver:
    return request.app.state.role_resolver


@router.post("/check")
async def check_access(
    request: Request,
    body: AccessCheckRequest,
    session: Session | None = Depends(get_optional_session),
) -> dict:
    """
    Settle a guard for the caller's session on `body.path`.

    Redirects are carried in the snapshot; the storefront performs the
    single navigation itself.
    """
    guard = AccessGuard(_resolver(request), _engine(request), body.path)
    snapshot = await guard.on_session_change(session)
    log.info(
        "access.check request_id=%s session_id=%s path=%s state=%s",
        body.request_id,
        session.session_id if session else None,
        guard.path,
        snapshot.state,
    )
    data = snapshot.model_dump()
    if not body.redirect:
        data["redirectTarget"] = None
    return success(data)


@router.get("/pages")
async def allowed_pages(
    request: Request,
    session: Session = Depends(get_session),
) -> dict:
    role = await _resolver(request).resolve(session)
    patterns = _engine(request).matrix.allowed_prefixes_for(role)
    return success({"role": role.value, "pages": [p.path for p in patterns]})
