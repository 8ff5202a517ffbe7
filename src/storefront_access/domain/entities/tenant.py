from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Tenant(BaseModel):
    """Mongo document model for the `tenants` collection."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    subdomain: str
    custom_domain: str | None = None
    domain_verified: bool = False
    domain_type: str = "subdomain"
    is_active: bool = True


class TenantBinding(BaseModel):
    """Mongo document model for `tenant_bindings`, keyed by principal id."""

    principal_id: str
    tenant_id: str
    role: str = "customer"
    created_at: datetime | None = None
