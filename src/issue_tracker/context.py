"""Wire the store, auth and services together for one process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth import AuthService
from .config import TrackerConfig, load_config
from .engine import (
    CommentService,
    ConsistencyMaintainer,
    DashboardService,
    TaskEngine,
    TeamService,
    UserService,
)
from .storage.bootstrap import seed_admin
from .storage.container import Container


@dataclass
class AppContext:
    config: TrackerConfig
    container: Container
    auth: AuthService
    consistency: ConsistencyMaintainer
    users: UserService
    teams: TeamService
    tasks: TaskEngine
    comments: CommentService
    dashboard: DashboardService


def build_context(
    config: Optional[TrackerConfig] = None,
    container: Optional[Container] = None,
) -> AppContext:
    """Create services over *container* and make sure the admin account exists."""
    config = config or load_config()
    container = container or Container()
    consistency = ConsistencyMaintainer(container)
    seed_admin(container, config)
    consistency.rebuild()
    return AppContext(
        config=config,
        container=container,
        auth=AuthService(container, config),
        consistency=consistency,
        users=UserService(container, consistency, config),
        teams=TeamService(container, consistency),
        tasks=TaskEngine(container, config),
        comments=CommentService(container),
        dashboard=DashboardService(container),
    )
