from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from nimbus.cli import main as cli_main
from nimbus.cli.main import app
from nimbus.transport import HttpObjectFetcher, ServerConfig

RUNNER = CliRunner()
pytestmark = pytest.mark.e2e


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for name in ("NIMBUS_SERVER__URL", "NIMBUS_SERVER__APPLICATION_ID"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def served_by(fake_server, monkeypatch: pytest.MonkeyPatch) -> list[ServerConfig]:
    """Route the CLI's fetcher to the fake server and record the server config it used."""
    used: list[ServerConfig] = []

    def create_fetcher(server: ServerConfig) -> HttpObjectFetcher:
        used.append(server)
        return HttpObjectFetcher(server, client=httpx.Client(transport=httpx.MockTransport(fake_server)))

    monkeypatch.setattr(cli_main, "create_fetcher", create_fetcher)
    return used


def test_get_prints_object_as_json(fake_server, served_by: list[ServerConfig]) -> None:
    fake_server.add("MyClass", "abc123", name="widget")

    result = RUNNER.invoke(app, ["get", "MyClass", "abc123"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["objectId"] == "abc123"
    assert payload["className"] == "MyClass"
    assert payload["name"] == "widget"


def test_get_missing_object_exits_with_error(fake_server, served_by: list[ServerConfig]) -> None:
    result = RUNNER.invoke(app, ["get", "MyClass", "missing"])

    assert result.exit_code == 1
    assert "MyClass 'missing' not found" in result.output


def test_get_reports_unreachable_server(fake_server, served_by: list[ServerConfig]) -> None:
    fake_server.offline = True

    result = RUNNER.invoke(app, ["get", "MyClass", "abc123", "--server-url", "https://down.example.test"])

    assert result.exit_code == 1
    assert "could not reach the server" in result.output
    assert "https://down.example.test" in result.output
    assert len(fake_server.requests) == 1


def test_get_options_override_config_file(
    fake_server, served_by: list[ServerConfig], isolated_dirs: Path
) -> None:
    config_file = isolated_dirs / "xdg-config" / "nimbus" / "config.yaml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(yaml.safe_dump({"server": {"url": "https://file.example.test", "application_id": "file"}}))
    fake_server.add("MyClass", "abc123")

    result = RUNNER.invoke(app, ["get", "MyClass", "abc123", "--app-id", "cli-app"])

    assert result.exit_code == 0, result.output
    (server,) = served_by
    assert server.url == "https://file.example.test"
    assert server.application_id == "cli-app"
    assert fake_server.requests[0].headers["X-Parse-Application-Id"] == "cli-app"


def test_get_fails_on_invalid_config(served_by: list[ServerConfig], isolated_dirs: Path) -> None:
    config_file = isolated_dirs / "xdg-config" / "nimbus" / "config.yaml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text("server:\n  timeout: -5\n")

    result = RUNNER.invoke(app, ["get", "MyClass", "abc123"])

    assert result.exit_code == 1
    assert "server.timeout" in result.output
    assert served_by == []


def test_config_show_json_includes_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NIMBUS_SERVER__URL", "https://env.example.test/parse")

    result = RUNNER.invoke(app, ["config", "show", "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["server"]["url"] == "https://env.example.test/parse"
    assert payload["logging"]["log_level"] == "INFO"


def test_config_path_points_at_xdg_config(isolated_dirs: Path) -> None:
    result = RUNNER.invoke(app, ["config", "path"])

    assert result.exit_code == 0
    assert result.stdout.strip() == str(isolated_dirs / "xdg-config" / "nimbus" / "config.yaml")


def test_root_without_command_prints_help() -> None:
    result = RUNNER.invoke(app, [])

    assert result.exit_code == 0
    assert "get" in result.stdout
