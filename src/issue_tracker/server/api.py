"""FastAPI application for the issue tracker."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..config import TrackerConfig
from ..constants import APP_NAME, APP_VERSION, FEATURES
from ..context import AppContext, build_context
from .auth_api import create_auth_router
from .comments_api import create_comments_router
from .dashboard_api import create_dashboard_router
from .envelope import install_error_handlers
from .task_api import create_task_router
from .teams_api import create_teams_router
from .users_api import create_users_router

ENDPOINTS = {
    "auth": "/api/auth",
    "users": "/api/users",
    "teams": "/api/teams",
    "tasks": "/api/tasks",
    "comments": "/api/comments",
    "dashboard": "/api/dashboard",
}


def create_app(
    config: Optional[TrackerConfig] = None,
    context: Optional[AppContext] = None,
    enable_cors: Optional[bool] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Runtime configuration; loaded from file and environment when omitted.
        context: Pre-built services, mainly for tests.  Built from *config* when omitted.
        enable_cors: Overrides ``config.enable_cors``.

    Returns:
        Configured FastAPI app.
    """
    if context is None:
        context = build_context(config)
    config = context.config
    if enable_cors is None:
        enable_cors = config.enable_cors

    app = FastAPI(
        title=APP_NAME,
        description="Role-based issue tracking API",
        version=APP_VERSION,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.context = context

    def _get_context() -> AppContext:
        return app.state.context

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    install_error_handlers(app)

    @app.get("/")
    async def root() -> dict[str, Any]:
        return {
            "success": True,
            "message": f"{APP_NAME} is running",
            "version": APP_VERSION,
            "endpoints": ENDPOINTS,
            "features": FEATURES,
        }

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "success": True,
            "message": "Server is healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(create_auth_router(_get_context))
    app.include_router(create_users_router(_get_context))
    app.include_router(create_teams_router(_get_context))
    app.include_router(create_task_router(_get_context))
    app.include_router(create_comments_router(_get_context))
    app.include_router(create_dashboard_router(_get_context))

    logger.debug("Application created (cors={})", enable_cors)
    return app
