from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Central configuration.

    - Values loaded from `.env`
    - Comma-separated lists for multi-value settings like CORS_ORIGINS
    """

    # ----------------------------
    # Service
    # ----------------------------
    SERVICE_NAME: str = "storefront-access-service"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ----------------------------
    # Mongo
    # ----------------------------
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "storefront"
    profiles_collection: str = "user_profiles"
    bindings_collection: str = "tenant_bindings"
    tenants_collection: str = "tenants"

    # ----------------------------
    # Redis
    # ----------------------------
    redis_url: str = "redis://localhost:6379/0"
    role_cache_prefix: str = "sa:role"

    # ----------------------------
    # CORS
    # ----------------------------
    # store as raw string list from env; we will normalize in code
    CORS_ORIGINS: Any = Field(default_factory=list)

    # ----------------------------
    # JWT
    # ----------------------------
    jwt_alg: str = "HS256"
    jwt_secret: str = "change-me"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # ----------------------------
    # Tenancy
    # ----------------------------
    base_domain: str = "mysystem.com"
    # paths served without tenant resolution
    public_paths: list[str] = Field(default_factory=lambda: ["/health", "/docs", "/openapi.json"])

    # ----------------------------
    # Access
    # ----------------------------
    # None means: strict everywhere except production
    strict_role_checks: bool | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in ("prod", "production")

    @property
    def strict_access(self) -> bool:
        if self.strict_role_checks is None:
            return not self.is_production
        return self.strict_role_checks


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
