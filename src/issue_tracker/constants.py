"""Shared constants for the issue tracker."""

from __future__ import annotations

APP_NAME = "Issue Tracker API"
APP_VERSION = "1.0.0"

CONFIG_ENV_VAR = "ISSUE_TRACKER_CONFIG"
ENV_PREFIX = "ISSUE_TRACKER_"

DEFAULT_SECRET_KEY = "dev-secret-change-in-production"
DEFAULT_ALGORITHM = "HS256"
DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24
DEFAULT_BCRYPT_ROUNDS = 10

DEFAULT_ADMIN_EMAIL = "admin@company.com"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_NAME = "Admin User"

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000

# Dashboard windows
COMPLETED_WINDOW_DAYS = 7
RECENT_ASSIGNMENTS = 3
RECENT_COMMENTS = 3
RECENT_STATUS_CHANGES = 2
RECENT_ACTIVITY_LIMIT = 5

FEATURES = [
    "Task Management",
    "Team Collaboration",
    "Comment System",
    "Role-based Access Control",
    "Dashboard & Analytics",
]
