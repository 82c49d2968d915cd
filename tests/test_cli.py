"""CLI smoke tests via click's CliRunner."""

import httpx
from click.testing import CliRunner

from issuehub import __version__
from issuehub.cli.main import main


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_commands_listed():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    for command in ("serve", "init-db", "seed", "ping"):
        assert command in result.output


def test_seed_asks_for_confirmation():
    """Declining the prompt leaves the database alone."""
    result = CliRunner().invoke(main, ["seed"], input="n\n")
    assert result.exit_code != 0
    assert "Seed complete" not in result.output


def test_ping_unreachable(monkeypatch):
    monkeypatch.setenv("ISSUEHUB_API_URL", "http://127.0.0.1:9")
    result = CliRunner().invoke(main, ["ping"])
    assert result.exit_code == 1


def test_ping_non_json_body(monkeypatch):
    def fake_get(url, timeout):
        return httpx.Response(
            200, text="<html>hello</html>", headers={"content-type": "text/html"}
        )

    monkeypatch.setattr(httpx, "get", fake_get)
    result = CliRunner().invoke(main, ["ping"])
    assert result.exit_code == 1
    assert "without a JSON body" in result.output


def test_ping_healthy(monkeypatch):
    def fake_get(url, timeout):
        return httpx.Response(200, json={"status": "healthy", "database": "ok"})

    monkeypatch.setattr(httpx, "get", fake_get)
    result = CliRunner().invoke(main, ["ping"])
    assert result.exit_code == 0
    assert "healthy" in result.output
