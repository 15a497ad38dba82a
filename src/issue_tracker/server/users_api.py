"""User endpoints mounted under ``/api/users``."""

from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..domain.models import Identity
from ..policy import Action
from .deps import action_dependency, identity_dependency
from .envelope import ok
from .models import CreateUserRequest, UpdateUserRequest


def create_users_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(prefix="/api/users", tags=["users"])
    current_identity = identity_dependency(get_context)
    can_create = action_dependency(get_context, Action.CREATE_USER)
    can_update = action_dependency(get_context, Action.UPDATE_USER)

    @router.get("")
    async def list_users(
        search: Optional[str] = Query(None),
        team_id: Optional[str] = Query(None),
        role: Optional[str] = Query(None),
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Any]:
        result = get_context().users.list_users(
            identity, search=search, team_id=team_id, role=role, page=page, limit=limit,
        )
        return ok([u.to_public_dict() for u in result.items], pagination=result.pagination())

    @router.get("/{user_id}")
    async def get_user(user_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        return ok(get_context().users.get_user(identity, user_id).to_public_dict())

    @router.post("")
    async def create_user(body: CreateUserRequest, identity: Identity = Depends(can_create)) -> dict[str, Any]:
        user = get_context().users.create_user(identity, **body.model_dump())
        return ok(user.to_public_dict(), message="User created successfully")

    @router.put("/{user_id}")
    async def update_user(
        user_id: str,
        body: UpdateUserRequest,
        identity: Identity = Depends(can_update),
    ) -> dict[str, Any]:
        user = get_context().users.update_user(identity, user_id, body.model_dump(exclude_unset=True))
        return ok(user.to_public_dict(), message="User updated successfully")

    return router
