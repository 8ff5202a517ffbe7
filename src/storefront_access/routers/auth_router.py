from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from storefront_access.auth.dependencies import get_principal, get_request_tenant, get_session
from storefront_access.auth.models import Principal, Session
from storefront_access.access.role_resolution import RoleResolver
from storefront_access.domain.entities.access import SessionEventRequest
from storefront_access.tenancy.binding_service import TenantBindingService
from storefront_access.utils.response import success
from storefront_access.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _binding_service(request: Request) -> TenantBindingService:
    return request.app.state.binding_service


def _resolver(request: Request) -> RoleResolver:
    return request.app.state.role_resolver


@router.post("/bind-tenant")
async def bind_tenant(
    request: Request,
    principal: Principal = Depends(get_principal),
    tenant_id: str = Depends(get_request_tenant),
) -> dict:
    log.info("auth.bind_tenant.start user_id=%s tenant_id=%s", principal.user_id, tenant_id)
    binding = await _binding_service(request).bind_principal_to_tenant(principal, tenant_id)
    log.info("auth.bind_tenant.done user_id=%s tenant_id=%s", principal.user_id, binding.tenant_id)
    return success(binding.model_dump(mode="json"), message="user bound to tenant")


@router.post("/session/events")
async def session_event(
    request: Request,
    body: SessionEventRequest,
    session: Session = Depends(get_session),
) -> dict:
    """Session changed on the client: drop whatever was cached for it."""
    log.info(
        "auth.session_event request_id=%s event=%s session_id=%s",
        body.request_id,
        body.event,
        session.session_id,
    )
    await _resolver(request).invalidate(session)
    return success({"event": body.event}, message="session event processed")
