"""Provide the public `issue_tracker` package exports."""

from __future__ import annotations

from .constants import APP_VERSION as __version__
from .server.api import create_app

__all__ = ["__version__", "create_app"]
