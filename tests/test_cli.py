from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from issue_tracker import cli
from issue_tracker.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("ISSUE_TRACKER_CONFIG", "ISSUE_TRACKER_PORT", "ISSUE_TRACKER_HOST", "ISSUE_TRACKER_SECRET_KEY"):
        monkeypatch.delenv(key, raising=False)


def test_show_config_masks_secrets(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_file = tmp_path / "tracker.yaml"
    config_file.write_text("auth:\n  secret_key: very-secret\nserver:\n  port: 8123\n", encoding="utf-8")

    assert main(["show-config", "--config", str(config_file), "--host", "0.0.0.0"]) == 0
    shown = yaml.safe_load(capsys.readouterr().out)
    assert shown["secret_key"] == "***"
    assert shown["admin_password"] == "***"
    assert shown["port"] == 8123
    assert shown["host"] == "0.0.0.0"


def test_missing_config_file_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show-config", "--config", str(tmp_path / "nope.yaml")]) == 1
    assert "not found" in capsys.readouterr().err


def test_serve_runs_uvicorn_with_resolved_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []

    def fake_run(app, **kwargs) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    assert main(["serve", "--port", "4010", "--log-level", "warning"]) == 0

    assert len(calls) == 1
    assert calls[0]["port"] == 4010
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["log_level"] == "warning"
    assert calls[0]["app"].title == "Issue Tracker API"
