"""Command line entrypoint: run the API server or inspect resolved configuration."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn
import yaml
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import TrackerConfig, load_config
from .constants import APP_NAME, APP_VERSION, DEFAULT_SECRET_KEY
from .errors import ConfigError
from .server.api import ENDPOINTS, create_app


def _configure_logging(level: str = "INFO") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan> - "
            "{message}"
        ),
    )


def _load(args: argparse.Namespace) -> TrackerConfig:
    overrides = {}
    for key in ("host", "port", "log_level"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    return load_config(args.config, overrides=overrides)


def _banner(config: TrackerConfig, console: Console) -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="cyan")
    table.add_column()
    table.add_row("Listening", f"http://{config.host}:{config.port}")
    table.add_row("Health", f"http://{config.host}:{config.port}/health")
    for name, path in ENDPOINTS.items():
        table.add_row(name.capitalize(), path)
    table.add_row("Admin", config.admin_email)
    console.print(Panel(table, title=f"{APP_NAME} v{APP_VERSION}", border_style="green"))


def _serve(args: argparse.Namespace) -> int:
    try:
        config = _load(args)
    except ConfigError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    _configure_logging(config.log_level)
    if config.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("Using the built-in development secret key; set ISSUE_TRACKER_SECRET_KEY")

    app = create_app(config)
    _banner(config, Console(stderr=True))
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


def _show_config(args: argparse.Namespace) -> int:
    try:
        config = _load(args)
    except ConfigError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    sys.stdout.write(yaml.safe_dump(config.to_dict(mask_secrets=True), sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{APP_NAME} - role-based issue tracking server")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--config", type=Path, default=None, help="YAML configuration file")
        sub.add_argument("--host", default=None, help="Bind address (overrides config)")
        sub.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
        sub.add_argument("--log-level", dest="log_level", default=None, help="Log level (overrides config)")

    serve = subparsers.add_parser("serve", help="Start the API server")
    _common(serve)
    serve.set_defaults(func=_serve)

    show = subparsers.add_parser("show-config", help="Print the resolved configuration with secrets masked")
    _common(show)
    show.set_defaults(func=_show_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == "__main__":
    raise SystemExit(main())
