"""Team endpoints mounted under ``/api/teams``."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..domain.models import Identity
from ..policy import Action
from .deps import action_dependency, identity_dependency
from .envelope import ok
from .models import CreateTeamRequest, UpdateTeamRequest


def create_teams_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(prefix="/api/teams", tags=["teams"])
    current_identity = identity_dependency(get_context)
    can_create = action_dependency(get_context, Action.CREATE_TEAM)
    can_update = action_dependency(get_context, Action.UPDATE_TEAM)

    @router.get("")
    async def list_teams(identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        return ok([t.to_dict() for t in get_context().teams.list_teams(identity)])

    @router.get("/{team_id}")
    async def get_team(team_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        return ok(get_context().teams.get_team(identity, team_id).to_dict())

    @router.get("/{team_id}/members")
    async def list_members(team_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        team, members = get_context().teams.list_members(identity, team_id)
        return ok({
            "team": {
                "id": team.id,
                "name": team.name,
                "description": team.description,
                "team_lead_id": team.team_lead_id,
                "team_lead_name": team.team_lead_name,
            },
            "members": [m.to_member_dict() for m in members],
        })

    @router.post("")
    async def create_team(body: CreateTeamRequest, identity: Identity = Depends(can_create)) -> dict[str, Any]:
        team = get_context().teams.create_team(identity, **body.model_dump())
        return ok(team.to_dict(), message="Team created successfully")

    @router.put("/{team_id}")
    async def update_team(
        team_id: str,
        body: UpdateTeamRequest,
        identity: Identity = Depends(can_update),
    ) -> dict[str, Any]:
        team = get_context().teams.update_team(identity, team_id, body.model_dump(exclude_unset=True))
        return ok(team.to_dict(), message="Team updated successfully")

    return router
