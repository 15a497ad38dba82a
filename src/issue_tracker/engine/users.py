"""User management: listing, creation and admin updates."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from loguru import logger

from ..auth import hash_password
from ..config import TrackerConfig
from ..domain.models import Identity, User, UserRole
from ..errors import DuplicateEmailError, NotFoundError, ValidationFailedError
from ..policy import Action, authorize, is_allowed
from ..storage.container import Container
from .common import Page, coerce_enum, paginate, require_text
from .consistency import ConsistencyMaintainer

USER_UPDATE_FIELDS = ("email", "name", "password", "role", "team_id", "is_active")


class UserService:
    def __init__(self, container: Container, consistency: ConsistencyMaintainer, config: TrackerConfig) -> None:
        self._c = container
        self._consistency = consistency
        self._config = config

    def _sees_inactive(self, actor: Identity) -> bool:
        return is_allowed(Action.VIEW_INACTIVE_USERS, actor.role)

    def list_users(
        self,
        actor: Identity,
        *,
        search: Optional[str] = None,
        team_id: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[User]:
        include_inactive = self._sees_inactive(actor)
        query = search.lower() if search else None
        out: list[User] = []
        for u in self._c.users.list():
            if not include_inactive and not u.is_active:
                continue
            if query and query not in u.name.lower() and query not in u.email.lower():
                continue
            if team_id and u.team_id != team_id:
                continue
            if role and u.role.value != role:
                continue
            out.append(u)
        return paginate(out, page, limit or self._config.default_page_size, max_limit=self._config.max_page_size)

    def get_user(self, actor: Identity, user_id: str) -> User:
        user = self._c.users.get(user_id)
        if user is None or (not user.is_active and not self._sees_inactive(actor)):
            raise NotFoundError("User not found")
        return user

    def _check_team(self, team_id: Optional[str]) -> None:
        if team_id and self._c.teams.get(team_id) is None:
            raise ValidationFailedError("Invalid team_id", details={"fields": ["team_id"]})

    def create_user(
        self,
        actor: Identity,
        *,
        email: str,
        name: str,
        password: str,
        role: Any,
        team_id: Optional[str] = None,
    ) -> User:
        authorize(actor, Action.CREATE_USER)
        if not (require_text(email) and require_text(name) and password and role):
            raise ValidationFailedError(
                "Email, name, password, and role are required",
                details={"required_fields": ["email", "name", "password", "role"]},
            )
        user_role = coerce_enum(UserRole, role, "role")
        email = email.strip()
        if self._c.users.get_by_email(email) is not None:
            raise DuplicateEmailError()
        self._check_team(team_id)

        user = User(
            email=email,
            name=name.strip(),
            password_hash=hash_password(password, rounds=self._config.bcrypt_rounds),
            role=user_role,
            team_id=team_id or None,
        )
        self._c.users.upsert(user)
        self._consistency.sync_user(user.id)
        logger.info("Created user {} ({}) role={}", user.id, user.email, user.role.value)
        return user

    def update_user(self, actor: Identity, user_id: str, patch: Mapping[str, Any]) -> User:
        """Apply an admin edit.  ``team_id: None`` removes the user from their team."""
        authorize(actor, Action.UPDATE_USER)
        user = self._c.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")

        unknown = sorted(set(patch) - set(USER_UPDATE_FIELDS))
        if unknown:
            raise ValidationFailedError(f"Unknown fields: {', '.join(unknown)}", details={"fields": unknown})

        # Validate everything before touching the record.
        email = patch.get("email")
        if email is not None:
            email = email.strip()
            if not email:
                raise ValidationFailedError("Email cannot be empty", details={"fields": ["email"]})
            existing = self._c.users.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise DuplicateEmailError()
        name = patch.get("name")
        if name is not None and not name.strip():
            raise ValidationFailedError("Name cannot be empty", details={"fields": ["name"]})
        role = coerce_enum(UserRole, patch["role"], "role") if patch.get("role") is not None else None
        if "team_id" in patch:
            self._check_team(patch["team_id"])
        if "is_active" in patch and not isinstance(patch["is_active"], bool):
            raise ValidationFailedError("'is_active' must be a boolean", details={"fields": ["is_active"]})

        previous_team_id = user.team_id
        if email is not None:
            user.email = email
        if name is not None:
            user.name = name.strip()
        if patch.get("password"):
            user.password_hash = hash_password(patch["password"], rounds=self._config.bcrypt_rounds)
        if role is not None:
            user.role = role
        if "team_id" in patch:
            user.team_id = patch["team_id"] or None
        if "is_active" in patch:
            user.is_active = patch["is_active"]
        user.touch()
        self._c.users.upsert(user)

        self._consistency.sync_user(user.id, previous_team_id)
        logger.info("Updated user {} fields {}", user.id, sorted(patch))
        return user
