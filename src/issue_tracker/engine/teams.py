"""Team management.

Admins see inactive teams; everyone else sees only active ones, and an
inactive team is indistinguishable from a missing one for them.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from loguru import logger

from ..domain.models import Identity, Team, User
from ..errors import NotFoundError, ValidationFailedError
from ..policy import Action, authorize, is_allowed
from ..storage.container import Container
from .common import require_text
from .consistency import ConsistencyMaintainer

TEAM_UPDATE_FIELDS = ("name", "description", "team_lead_id", "is_active")


class TeamService:
    def __init__(self, container: Container, consistency: ConsistencyMaintainer) -> None:
        self._c = container
        self._consistency = consistency

    def _visible(self, actor: Identity, team: Team) -> bool:
        return team.is_active or is_allowed(Action.VIEW_INACTIVE_TEAMS, actor.role)

    def list_teams(self, actor: Identity) -> list[Team]:
        return [t for t in self._c.teams.list() if self._visible(actor, t)]

    def get_team(self, actor: Identity, team_id: str) -> Team:
        team = self._c.teams.get(team_id)
        if team is None or not self._visible(actor, team):
            raise NotFoundError("Team not found")
        return team

    def list_members(self, actor: Identity, team_id: str) -> tuple[Team, list[User]]:
        team = self.get_team(actor, team_id)
        members = [u for u in self._c.users.list() if u.team_id == team.id and u.is_active]
        return team, members

    def _active_lead(self, team_lead_id: Optional[str]) -> User:
        lead = self._c.users.get(team_lead_id) if team_lead_id else None
        if lead is None or not lead.is_active:
            raise ValidationFailedError("Invalid team_lead_id", details={"fields": ["team_lead_id"]})
        return lead

    def _move_lead_into(self, lead: User, team: Team) -> Optional[str]:
        """Place *lead* in *team*; returns the team they left, if any."""
        previous = lead.team_id
        if previous != team.id:
            lead.team_id = team.id
            lead.touch()
            self._c.users.upsert(lead)
        return previous

    def create_team(
        self,
        actor: Identity,
        *,
        name: str,
        team_lead_id: str,
        description: Optional[str] = None,
    ) -> Team:
        authorize(actor, Action.CREATE_TEAM)
        if not (require_text(name) and team_lead_id):
            raise ValidationFailedError(
                "Name and team_lead_id are required",
                details={"required_fields": ["name", "team_lead_id"]},
            )
        lead = self._active_lead(team_lead_id)

        team = Team(name=name.strip(), description=description, team_lead_id=lead.id, team_lead_name=lead.name)
        self._c.teams.upsert(team)
        previous = self._move_lead_into(lead, team)
        self._consistency.sync_user(lead.id, previous)
        logger.info("Created team {} ({}) led by {}", team.id, team.name, lead.id)
        return team

    def update_team(self, actor: Identity, team_id: str, patch: Mapping[str, Any]) -> Team:
        authorize(actor, Action.UPDATE_TEAM)
        team = self._c.teams.get(team_id)
        if team is None:
            raise NotFoundError("Team not found")

        unknown = sorted(set(patch) - set(TEAM_UPDATE_FIELDS))
        if unknown:
            raise ValidationFailedError(f"Unknown fields: {', '.join(unknown)}", details={"fields": unknown})

        name = patch.get("name")
        if name is not None and not name.strip():
            raise ValidationFailedError("Name cannot be empty", details={"fields": ["name"]})
        lead = self._active_lead(patch["team_lead_id"]) if patch.get("team_lead_id") else None
        if "is_active" in patch and not isinstance(patch["is_active"], bool):
            raise ValidationFailedError("'is_active' must be a boolean", details={"fields": ["is_active"]})

        if name is not None:
            team.name = name.strip()
        if "description" in patch:
            team.description = patch["description"]
        if "is_active" in patch:
            team.is_active = patch["is_active"]
        if lead is not None:
            team.team_lead_id = lead.id
        team.touch()
        self._c.teams.upsert(team)

        if lead is not None:
            previous = self._move_lead_into(lead, team)
            self._consistency.sync_user(lead.id, previous)
        self._consistency.refresh_team(team.id)
        logger.info("Updated team {} fields {}", team.id, sorted(patch))
        return team
