"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (create_app) with metadata
  - Open/close the DB pool and install the Container in the lifespan
  - Configure middleware (CORS, request context)
  - Mount auth and admin routers under /api
  - Expose the /health check

Collaborators:
  - container.Container: composition root (app.state.container)
  - infrastructure.db.pool.DatabasePool: injected pool handle
  - RequestContextMiddleware: request ID and logging context
  - api.exception_handlers: uniform error envelope

Notes:
  - Middleware order matters: RequestContext -> CORS -> routes
  - Test environments (APP_ENV=test|testing|ci) never open a pool; the
    container falls back to the in-memory store
  - A prebuilt container can be injected (tests); the lifespan then leaves it
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..container import Container
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.pool import DatabasePool
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

API_PREFIX = "/api"


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown: pool + container."""
        pool: DatabasePool | None = None

        if getattr(app.state, "container", None) is None:
            if not settings.is_test():
                pool = DatabasePool.from_settings(settings).open()
            app.state.container = Container.build(settings, pool=pool)

        logger.info(
            "HRMS API starting up",
            extra={
                "app_env": settings.app_env,
                "email_enabled": settings.email_enabled,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        try:
            yield
        finally:
            if pool is not None:
                pool.close()
            logger.info("HRMS API shutting down")

    return lifespan


def create_app(
    settings: Settings | None = None, *, container: Container | None = None
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="WorkZen HRMS API",
        version="0.1.0",
        lifespan=_lifespan(settings),
        openapi_tags=[
            {"name": "auth", "description": "Login, sessions and password reset"},
            {"name": "admin", "description": "User administration (role admin)"},
        ],
    )
    app.state.settings = settings
    app.state.container = container

    # Bottom = first to execute.
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
    register_exception_handlers(app)

    @app.get("/health")
    def health(request: Request):
        """
        Liveness + estado de la DB.

        db: "connected" | "disconnected" | "in-memory"
        """
        pool = getattr(request.app.state.container, "pool", None)
        if pool is None:
            db_status = "in-memory"
        else:
            db_status = "connected" if pool.ping() else "disconnected"

        return {
            "status": "ok" if db_status != "disconnected" else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "db": db_status,
        }

    return app


app = create_app()
