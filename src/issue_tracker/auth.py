"""Bearer-token authentication and password hashing."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Iterable, Optional

import bcrypt
import jwt
from loguru import logger

from .config import TrackerConfig
from .constants import DEFAULT_BCRYPT_ROUNDS
from .domain.models import Identity, User, UserRole
from .errors import ForbiddenError, InvalidCredentialsError, UnauthorizedError

if TYPE_CHECKING:
    from .storage.container import Container


def hash_password(password: str, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plaintext password.
        rounds: bcrypt cost factor.

    Returns:
        The encoded hash as text.
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    data: dict[str, Any],
    config: TrackerConfig,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        data: Claims to encode.
        config: Supplies the secret, algorithm and default lifetime.
        expires_delta: Optional lifetime override.

    Returns:
        Encoded JWT token.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.token_expire_minutes)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, config.secret_key, algorithm=config.algorithm)


def decode_access_token(token: str, config: TrackerConfig) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        UnauthorizedError: If the token is malformed, tampered with, or expired.
    """
    try:
        return jwt.decode(token, config.secret_key, algorithms=[config.algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc


def parse_bearer(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise UnauthorizedError("Access token required")
    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Invalid authorization header")
    return token


def require_role(identity: Identity, allowed_roles: Iterable[UserRole], *, message: Optional[str] = None) -> None:
    """Fail with FORBIDDEN unless the caller holds one of *allowed_roles*."""
    allowed = set(allowed_roles)
    if identity.role not in allowed:
        logger.warning(
            "{} ({}) denied; requires one of {}",
            identity.id, identity.role.value, sorted(r.value for r in allowed),
        )
        raise ForbiddenError(message or "Insufficient permissions")


class AuthService:
    """Issues tokens on login and turns tokens back into identities."""

    def __init__(self, container: "Container", config: TrackerConfig) -> None:
        self._container = container
        self._config = config

    def login(self, email: str, password: str) -> tuple[str, User]:
        user = self._container.users.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for {}", email)
            raise InvalidCredentialsError()
        token = create_access_token(
            {"sub": user.id, "role": user.role.value, "team_id": user.team_id},
            self._config,
        )
        logger.info("User {} logged in", user.id)
        return token, user

    def verify(self, token: str) -> Identity:
        payload = decode_access_token(token, self._config)
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise UnauthorizedError("Invalid token")
        try:
            role = UserRole(payload.get("role"))
        except ValueError as exc:
            raise UnauthorizedError("Invalid token") from exc
        team_id = payload.get("team_id")
        return Identity(id=subject, role=role, team_id=team_id if isinstance(team_id, str) else None)

    def authenticate_header(self, header: Optional[str]) -> Identity:
        return self.verify(parse_bearer(header))

    def current_user(self, identity: Identity) -> User:
        user = self._container.users.get(identity.id)
        if user is None:
            raise UnauthorizedError("User no longer exists")
        return user
