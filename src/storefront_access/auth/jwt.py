from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from storefront_access.auth.models import Session
from storefront_access.configs.settings import Settings
from storefront_access.errors import AuthError
from storefront_access.configs.logging_config import get_logger
log = get_logger(__name__)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate the session JWT issued by the auth provider.

    Only HS256 with a shared secret is wired up; the algorithm is still read
    from settings so the provider's choice is explicit.
    """
    try:
        options = {"verify_aud": settings.jwt_audience is not None}
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
        log.debug("jwt.decode ok sub=%s sid=%s", claims.get("sub"), claims.get("sid"))
        return claims
    except JWTError as e:
        log.info("jwt.decode failed: %s", str(e))
        raise AuthError("invalid token") from e


def session_from_claims(claims: dict[str, Any]) -> Session:
    user_id = claims.get("sub")
    if not user_id:
        log.info("auth.token_missing_claims has_sub=%s", bool(user_id))
        raise AuthError("token missing required claims")

    # Providers may keep `sid` stable across refreshes, so the issue time is
    # part of the identity: every refreshed token resolves its role afresh.
    base = claims.get("sid") or claims.get("session_id") or user_id
    iat = claims.get("iat")
    session_id = f"{base}:{iat}" if iat is not None else str(base)

    tenant_id = claims.get("tenant_id") or claims.get("tenantId")
    exp = claims.get("exp")
    return Session(
        user_id=str(user_id),
        session_id=str(session_id),
        tenant_id=str(tenant_id) if tenant_id else None,
        expires_at=int(exp) if exp is not None else None,
    )
