from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront_access.access.decision import AccessDecisionEngine
from storefront_access.access.permission_matrix import DEFAULT_MATRIX
from storefront_access.access.role_resolution import RoleResolver
from storefront_access.configs.logging_config import get_logger, setup_logging
from storefront_access.configs.settings import Settings, get_settings
from storefront_access.errors import AppError
from storefront_access.repositories.binding_repository import BindingRepository
from storefront_access.repositories.mongo import get_mongo_client, get_mongo_db
from storefront_access.repositories.profile_repository import ProfileRepository
from storefront_access.repositories.redis_client import RedisClient
from storefront_access.repositories.role_cache import RoleCache
from storefront_access.repositories.tenant_repository import TenantRepository
from storefront_access.routers.access_router import router as access_router
from storefront_access.routers.auth_router import router as auth_router
from storefront_access.routers.health_router import router as health_router
from storefront_access.tenancy.binding_service import TenantBindingService
from storefront_access.tenancy.resolver import TenantResolver
from storefront_access.utils.response import failure

log = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="storefront_access", version="0.1.0")
    app.state.settings = settings

    @app.middleware("http")
    async def tenant_context_middleware(request: Request, call_next):
        path = request.url.path
        if any(path == p or path.startswith(p + "/") for p in settings.public_paths):
            return await call_next(request)

        resolver: TenantResolver = request.app.state.tenant_resolver
        try:
            tenant = await resolver.resolve(request.headers.get("host"))
        except AppError as exc:
            log.info("tenant.resolve_failed path=%s status=%s message=%s", path, exc.http_status, exc.message)
            return JSONResponse(status_code=exc.http_status, content=failure(exc.message))

        request.state.tenant_id = tenant.id
        request.state.tenant = tenant
        response = await call_next(request)
        response.headers["x-tenant-id"] = tenant.id
        return response

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")

        log.info(
            "request.start method=%s path=%s request_id=%s host=%s",
            method,
            path,
            request_id,
            request.headers.get("host"),
        )
        status_code = "unknown"
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                status_code,
                request_id,
                elapsed_ms,
            )
        return response

    # CORS is added last so it is the outermost layer: tenant failures and
    # preflights on unresolved hosts still carry CORS headers.
    # Normalize CORS origins from settings (.env can provide a comma-separated string)
    raw_origins = settings.CORS_ORIGINS
    if isinstance(raw_origins, str):
        origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    elif isinstance(raw_origins, (list, tuple, set)):
        origins = list(raw_origins)
    else:
        origins = []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(access_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info("request.error type=%s status=%s message=%s", type(exc).__name__, exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        setup_logging(settings.LOG_LEVEL)

        mongo_client = get_mongo_client(settings)
        mongo_db = get_mongo_db(mongo_client, settings)
        redis_client = RedisClient(settings)
        await redis_client.connect()

        app.state.mongo_client = mongo_client
        app.state.mongo_db = mongo_db
        app.state.redis_client = redis_client

        tenant_repo = TenantRepository(mongo_db, settings)
        await tenant_repo.ensure_indexes()

        app.state.tenant_resolver = TenantResolver(tenant_repo, settings.base_domain)
        app.state.access_engine = AccessDecisionEngine(DEFAULT_MATRIX, strict=settings.strict_access)
        app.state.role_resolver = RoleResolver(
            ProfileRepository(mongo_db, settings),
            RoleCache(redis_client.client, settings),
        )
        app.state.binding_service = TenantBindingService(BindingRepository(mongo_db, settings))
        log.info(
            "startup.done environment=%s strict_access=%s base_domain=%s",
            settings.ENVIRONMENT,
            settings.strict_access,
            settings.base_domain,
        )

    @app.on_event("shutdown")
    async def shutdown() -> None:
        log.info("shutdown.begin")
        redis_client = getattr(app.state, "redis_client", None)
        if redis_client is not None:
            await redis_client.close()
        mongo_client = getattr(app.state, "mongo_client", None)
        if mongo_client is not None:
            mongo_client.close()
        log.info("shutdown.done")

    return app


app = create_app()
