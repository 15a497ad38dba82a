from __future__ import annotations

from loguru import logger

from ..auth import hash_password
from ..config import TrackerConfig
from ..domain.models import User, UserRole
from .container import Container


def seed_admin(container: Container, config: TrackerConfig) -> User:
    """Ensure the configured admin account exists; returns it."""
    existing = container.users.get_by_email(config.admin_email)
    if existing is not None:
        return existing
    admin = User(
        email=config.admin_email,
        name=config.admin_name,
        password_hash=hash_password(config.admin_password, rounds=config.bcrypt_rounds),
        role=UserRole.ADMIN,
    )
    container.users.upsert(admin)
    logger.info("Seeded admin user {} ({})", admin.email, admin.id)
    return admin
