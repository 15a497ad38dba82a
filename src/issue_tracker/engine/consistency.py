"""Keep cached counts and denormalized names in step with the store.

Every method recomputes from current store contents, so calling one twice
(or calling one that was not strictly needed) is harmless.
"""

from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger

from ..storage.container import Container


class ConsistencyMaintainer:
    def __init__(self, container: Container) -> None:
        self._c = container

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def count_members(self, team_id: str) -> int:
        return sum(1 for u in self._c.users.list() if u.team_id == team_id and u.is_active)

    def refresh_team(self, team_id: Optional[str]) -> None:
        """Recount members and push the team's current name and lead name out."""
        if not team_id:
            return
        team = self._c.teams.get(team_id)
        if team is None:
            return

        count = self.count_members(team.id)
        lead = self._c.users.get(team.team_lead_id) if team.team_lead_id else None
        lead_name = lead.name if lead else None
        if team.member_count != count or team.team_lead_name != lead_name:
            team.member_count = count
            team.team_lead_name = lead_name
            self._c.teams.upsert(team)

        for user in self._c.users.list():
            if user.team_id == team.id and user.team_name != team.name:
                user.team_name = team.name
                user.touch()
                self._c.users.upsert(user)

        for task in self._c.tasks.list():
            if task.team_id == team.id and task.team_name != team.name:
                task.team_name = team.name
                self._c.tasks.upsert(task)

    def refresh_teams(self, team_ids: Iterable[Optional[str]]) -> None:
        seen: set[str] = set()
        for team_id in team_ids:
            if team_id and team_id not in seen:
                seen.add(team_id)
                self.refresh_team(team_id)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def refresh_user(self, user_id: str) -> None:
        """Push a user's current name, email and team name to every copy."""
        user = self._c.users.get(user_id)
        if user is None:
            return

        team = self._c.teams.get(user.team_id) if user.team_id else None
        team_name = team.name if team else None
        if user.team_name != team_name:
            user.team_name = team_name
            user.touch()
            self._c.users.upsert(user)

        for task in self._c.tasks.list():
            changed = False
            if task.assignee_id == user.id and (task.assignee_name, task.assignee_email) != (user.name, user.email):
                task.assignee_name = user.name
                task.assignee_email = user.email
                changed = True
            if task.reporter_id == user.id and task.reporter_name != user.name:
                task.reporter_name = user.name
                changed = True
            if changed:
                self._c.tasks.upsert(task)

        for led in self._c.teams.list():
            if led.team_lead_id == user.id and led.team_lead_name != user.name:
                led.team_lead_name = user.name
                self._c.teams.upsert(led)

    def sync_user(self, user_id: str, previous_team_id: Optional[str] = None) -> None:
        """Run after a user is created or their team, activity, name or email changes."""
        user = self._c.users.get(user_id)
        if user is None:
            return
        self.refresh_user(user_id)
        self.refresh_teams([previous_team_id, user.team_id])
        logger.debug("Synced user {} (teams {} -> {})", user_id, previous_team_id, user.team_id)

    # ------------------------------------------------------------------
    # Whole store
    # ------------------------------------------------------------------

    def rebuild(self) -> None:
        """Recompute every cached field from scratch."""
        for user in self._c.users.list():
            self.refresh_user(user.id)
        for team in self._c.teams.list():
            self.refresh_team(team.id)
