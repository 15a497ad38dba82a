"""Login and current-user endpoints mounted under ``/api/auth``."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..domain.models import Identity
from .deps import identity_dependency
from .envelope import ok
from .models import LoginRequest


def create_auth_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(prefix="/api/auth", tags=["auth"])
    current_identity = identity_dependency(get_context)

    @router.post("/login")
    async def login(body: LoginRequest) -> dict[str, Any]:
        """Exchange email and password for a bearer token."""
        token, user = get_context().auth.login(body.email, body.password)
        return ok({"token": token, "user": user.to_public_dict()}, message="Login successful")

    @router.get("/me")
    async def me(identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        user = get_context().auth.current_user(identity)
        return ok(user.to_public_dict())

    return router
