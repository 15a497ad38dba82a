"""Load tracker configuration from defaults, an optional YAML file and the environment."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .constants import (
    CONFIG_ENV_VAR,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_NAME,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ALGORITHM,
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_HOST,
    DEFAULT_PAGE_SIZE,
    DEFAULT_PORT,
    DEFAULT_SECRET_KEY,
    DEFAULT_TOKEN_EXPIRE_MINUTES,
    ENV_PREFIX,
    MAX_PAGE_SIZE,
)
from .errors import ConfigError
from .utils import _coerce_bool, _coerce_int


@dataclass
class TrackerConfig:
    """Resolved runtime configuration."""

    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = DEFAULT_ALGORITHM
    token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    admin_name: str = DEFAULT_ADMIN_NAME

    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE

    log_level: str = "INFO"
    enable_cors: bool = True
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def to_dict(self, *, mask_secrets: bool = False) -> dict[str, Any]:
        data = asdict(self)
        if mask_secrets:
            data["secret_key"] = "***"
            data["admin_password"] = "***"
        return data


# Nested YAML sections map onto flat config keys.
_SECTIONS: dict[str, dict[str, str]] = {
    "auth": {
        "secret_key": "secret_key",
        "algorithm": "algorithm",
        "token_expire_minutes": "token_expire_minutes",
        "bcrypt_rounds": "bcrypt_rounds",
    },
    "admin": {
        "email": "admin_email",
        "password": "admin_password",
        "name": "admin_name",
    },
    "pagination": {
        "default_page_size": "default_page_size",
        "max_page_size": "max_page_size",
    },
    "server": {
        "host": "host",
        "port": "port",
        "enable_cors": "enable_cors",
        "log_level": "log_level",
    },
}

_ENV_KEYS: dict[str, str] = {
    "secret_key": "SECRET_KEY",
    "algorithm": "JWT_ALGORITHM",
    "token_expire_minutes": "TOKEN_EXPIRE_MINUTES",
    "bcrypt_rounds": "BCRYPT_ROUNDS",
    "admin_email": "ADMIN_EMAIL",
    "admin_password": "ADMIN_PASSWORD",
    "admin_name": "ADMIN_NAME",
    "default_page_size": "PAGE_SIZE",
    "max_page_size": "MAX_PAGE_SIZE",
    "log_level": "LOG_LEVEL",
    "enable_cors": "ENABLE_CORS",
    "host": "HOST",
    "port": "PORT",
}


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file and flatten its known sections.

    Args:
        path: YAML file to read.

    Returns:
        Mapping of flat config keys to raw values.

    Raises:
        ConfigError: If the file is missing, unparsable, or not a mapping.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    flat: dict[str, Any] = {}
    for key, value in raw.items():
        section = _SECTIONS.get(str(key))
        if section is not None and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                target = section.get(str(sub_key))
                if target:
                    flat[target] = sub_value
        else:
            flat[str(key)] = value
    return flat


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, suffix in _ENV_KEYS.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value is not None and value != "":
            out[key] = value
    return out


def _apply(config: TrackerConfig, values: Mapping[str, Any]) -> None:
    known = {f.name: f for f in fields(TrackerConfig)}
    for key, raw in values.items():
        if key not in known:
            continue
        current = getattr(config, key)
        if isinstance(current, bool):
            setattr(config, key, _coerce_bool(raw, current))
        elif isinstance(current, int):
            setattr(config, key, _coerce_int(raw, current))
        else:
            setattr(config, key, str(raw))


def _normalize(config: TrackerConfig) -> TrackerConfig:
    config.bcrypt_rounds = _coerce_int(config.bcrypt_rounds, DEFAULT_BCRYPT_ROUNDS, minimum=4, maximum=31)
    config.token_expire_minutes = _coerce_int(config.token_expire_minutes, DEFAULT_TOKEN_EXPIRE_MINUTES, minimum=1)
    config.max_page_size = _coerce_int(config.max_page_size, MAX_PAGE_SIZE, minimum=1)
    config.default_page_size = _coerce_int(
        config.default_page_size, DEFAULT_PAGE_SIZE, minimum=1, maximum=config.max_page_size
    )
    config.port = _coerce_int(config.port, DEFAULT_PORT, minimum=1, maximum=65535)
    config.log_level = config.log_level.upper()
    return config


def load_config(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> TrackerConfig:
    """Resolve the tracker configuration.

    Precedence (lowest first): built-in defaults, the YAML file, environment
    variables, explicit ``overrides``.

    Args:
        path: Optional YAML file.  Falls back to ``$ISSUE_TRACKER_CONFIG``.
        environ: Environment mapping (defaults to ``os.environ``).
        overrides: Values that win over every other source.

    Returns:
        The resolved configuration.
    """
    env = os.environ if environ is None else environ
    config = TrackerConfig()

    config_path = path
    if config_path is None and env.get(CONFIG_ENV_VAR):
        config_path = Path(env[CONFIG_ENV_VAR])
    if config_path is not None:
        _apply(config, _read_config_file(Path(config_path)))

    _apply(config, _read_env(env))
    if overrides:
        _apply(config, overrides)
    return _normalize(config)
