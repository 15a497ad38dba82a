"""Dashboard statistics endpoint mounted under ``/api/dashboard``."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..domain.models import Identity
from .deps import identity_dependency
from .envelope import ok


def create_dashboard_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
    current_identity = identity_dependency(get_context)

    @router.get("/stats")
    async def stats(identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        return ok(get_context().dashboard.stats(identity))

    return router
