from __future__ import annotations

from typing import Protocol

from storefront_access.access.roles import DEFAULT_ROLE
from storefront_access.auth.models import Principal
from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.tenant import TenantBinding
from storefront_access.errors import AlreadyBoundToDifferentTenant, AuthError, TenantNotResolved

log = get_logger(__name__)


class BindingStore(Protocol):
    async def bind_if_absent(
        self, *, principal_id: str, tenant_id: str, role: str
    ) -> tuple[TenantBinding, bool]: ...


class TenantBindingService:
    """
    Associates a principal with the tenant of the current request, once.

    Re-binding to the same tenant is a no-op; re-binding to another tenant is
    refused and leaves the stored binding as it was.
    """

    def __init__(self, bindings: BindingStore):
        self._bindings = bindings

    async def bind_principal_to_tenant(self, principal: Principal, tenant_id: str | None) -> TenantBinding:
        if not principal.user_id:
            raise AuthError("principal is not authenticated")
        if not tenant_id or not tenant_id.strip():
            log.warning("bind.tenant_not_resolved principal=%s", principal.user_id)
            raise TenantNotResolved()

        binding, created = await self._bindings.bind_if_absent(
            principal_id=principal.user_id,
            tenant_id=tenant_id,
            role=DEFAULT_ROLE.value,
        )
        if binding.tenant_id != tenant_id:
            log.warning(
                "bind.conflict principal=%s bound=%s requested=%s",
                principal.user_id,
                binding.tenant_id,
                tenant_id,
            )
            raise AlreadyBoundToDifferentTenant(principal.user_id, binding.tenant_id, tenant_id)

        if created:
            log.info("bind.created principal=%s tenant=%s", principal.user_id, tenant_id)
        else:
            log.info("bind.already_bound principal=%s tenant=%s", principal.user_id, tenant_id)
        return binding
