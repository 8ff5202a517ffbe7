from __future__ import annotations

from typing import Protocol

from storefront_access.configs.logging_config import get_logger
from storefront_access.domain.entities.tenant import Tenant
from storefront_access.errors import ForbiddenError, NotFoundError, TenantNotResolved
from storefront_access.tenancy.host import is_valid_subdomain, parse_domain

log = get_logger(__name__)


class TenantStore(Protocol):
    async def get_by_subdomain(self, subdomain: str) -> Tenant | None: ...

    async def get_by_custom_domain(self, domain: str) -> Tenant | None: ...


class TenantResolver:
    """Maps the request host to an active tenant."""

    def __init__(self, tenants: TenantStore, base_domain: str):
        self._tenants = tenants
        self._base_domain = base_domain

    async def resolve(self, host: str | None) -> Tenant:
        if not host:
            raise TenantNotResolved("missing host")

        info = parse_domain(host, self._base_domain)
        if info.is_custom_domain:
            tenant = await self._tenants.get_by_custom_domain(info.hostname)
        elif info.subdomain is None:
            # bare base domain: store selection page, no tenant
            raise TenantNotResolved("no store selected")
        elif not is_valid_subdomain(info.subdomain):
            log.info("tenant.invalid_subdomain host=%s", info.hostname)
            raise TenantNotResolved("invalid store address")
        else:
            tenant = await self._tenants.get_by_subdomain(info.subdomain)

        if tenant is None:
            log.info("tenant.not_found host=%s", info.hostname)
            raise NotFoundError("store not found")
        if not tenant.is_active:
            log.info("tenant.inactive tenant_id=%s", tenant.id)
            raise ForbiddenError("store is not active")
        return tenant
