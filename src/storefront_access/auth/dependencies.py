from __future__ import annotations

from fastapi import Depends, Request

from storefront_access.auth.jwt import decode_token, session_from_claims
from storefront_access.auth.models import Principal, Session
from storefront_access.configs.settings import Settings
from storefront_access.errors import AuthError, TenantNotResolved
from storefront_access.configs.logging_config import get_logger

log = get_logger(__name__)


def _bearer_token(header: str | None) -> str:
    if not header:
        raise AuthError("missing authorization header")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("invalid authorization header")
    return token.strip()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_optional_session(request: Request, settings: Settings = Depends(get_app_settings)) -> Session | None:
    """Session for the request, or None when no credentials were sent."""
    header = request.headers.get("authorization")
    if not header:
        cookie = request.cookies.get("access_token")
        if not cookie:
            return None
        header = f"Bearer {cookie}"
    claims = decode_token(_bearer_token(header), settings)
    return session_from_claims(claims)


def get_session(session: Session | None = Depends(get_optional_session)) -> Session:
    if session is None:
        log.info("auth.missing_bearer_token")
        raise AuthError("missing authorization header")
    return session


def get_request_tenant(request: Request) -> str:
    """Tenant id set by the tenant middleware from the request host."""
    tenant_id = getattr(request.state, "tenant_id", None)
    if not tenant_id:
        raise TenantNotResolved()
    return tenant_id


def get_principal(request: Request, session: Session = Depends(get_session)) -> Principal:
    principal = Principal.from_session(session)
    tenant_id = getattr(request.state, "tenant_id", None)
    if tenant_id:
        principal = principal.with_tenant(tenant_id)
    log.info(
        "auth.principal tenant_id=%s user_id=%s session_id=%s",
        principal.tenant_id,
        principal.user_id,
        principal.session_id,
    )
    return principal
