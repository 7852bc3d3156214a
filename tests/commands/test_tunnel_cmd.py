"""Tests for ``harbor tunnel`` and ``harbor tunnels``."""

from __future__ import annotations

import json

import pytest

TUNNEL_URL = "https://bright-fox-example.trycloudflare.com"


@pytest.fixture(autouse=True)
def _fast_polling(harbor_home) -> None:
    (harbor_home / "harbor.toml").write_text(
        "[tunnel]\ntimeout = 0.05\npoll_interval = 0.01\n", encoding="utf-8"
    )


@pytest.fixture
def webui(engine) -> None:
    engine.respond("docker", "port", "harbor.webui", stdout="8080/tcp -> 0.0.0.0:33801\n")


class TestTunnel:
    @pytest.mark.usefixtures("webui")
    def test_ready(self, harbor, engine) -> None:
        engine.respond("docker", "logs", stdout=f"INF |  {TUNNEL_URL}  |\n")
        result = harbor("tunnel", "webui")
        assert result.exit_code == 0, result.output
        assert "Starting new tunnel for webui..." in result.stderr
        assert TUNNEL_URL in result.stdout
        assert engine.calls_with("docker", "stop") == []
        (argv,) = engine.calls_with("run", "--rm", "qrgen")
        assert argv[-1] == TUNNEL_URL

    @pytest.mark.usefixtures("webui")
    def test_json(self, harbor, engine) -> None:
        engine.respond("docker", "logs", stdout=f"{TUNNEL_URL}\n")
        result = harbor("--json", "t", "webui")
        payload = json.loads(result.stdout)
        assert payload["data"]["public_url"] == TUNNEL_URL
        assert payload["data"]["state"] == "ready"
        assert "Starting" not in result.stderr
        assert engine.calls_with("qrgen") == []

    @pytest.mark.usefixtures("webui")
    def test_quiet_prints_only_url(self, harbor, engine) -> None:
        engine.respond("docker", "logs", stdout=f"{TUNNEL_URL}\n")
        result = harbor("-q", "tunnel", "webui")
        assert result.stdout.strip() == TUNNEL_URL

    @pytest.mark.usefixtures("webui")
    def test_timeout(self, harbor, engine) -> None:
        engine.respond("docker", "ps", "--filter", handler=_running)
        result = harbor("tunnel", "webui")
        assert result.exit_code == 1
        assert "Failed to obtain tunnel URL" in result.stderr
        assert engine.calls_with("docker", "stop")

    def test_unknown_service(self, harbor, engine) -> None:
        engine.respond("docker", "port", returncode=1, stderr="No such container")
        result = harbor("tunnel", "nope")
        assert result.exit_code == 1
        assert "ERROR" in result.stderr

    @pytest.mark.parametrize("word", ["down", "stop", "d", "s"])
    def test_stop_words(self, harbor, engine, word: str) -> None:
        engine.respond("docker", "ps", "--filter", stdout="harbor.cfd.tunnel.webui.1\n")
        result = harbor("tunnel", word)
        assert result.exit_code == 0
        assert "Stopped 1 tunnel(s)" in result.stdout
        assert engine.calls_with("docker", "stop", "harbor.cfd.tunnel.webui.1")

    def test_stop_with_nothing_running(self, harbor, engine) -> None:
        result = harbor("tunnel", "down")
        assert result.stdout.strip() == "No tunnels running"


def _running(argv: list[str]):
    import subprocess

    name = next(a.removeprefix("name=") for a in argv if a.startswith("name="))
    return subprocess.CompletedProcess(argv, 0, stdout=name + "\n", stderr="")


class TestTunnelsList:
    def test_empty(self, harbor) -> None:
        result = harbor("tunnels")
        assert result.exit_code == 0
        assert result.stdout.strip() == "Config services.tunnels is empty"

    def test_add_ls_rm(self, harbor) -> None:
        assert harbor("tunnels", "add", "webui").exit_code == 0
        assert harbor("tunnels", "add", "ollama").exit_code == 0
        assert harbor("tunnels", "ls").stdout.split() == ["webui", "ollama"]
        assert harbor("tunnels", "rm", "0").exit_code == 0
        assert harbor("tunnels", "list").stdout.split() == ["ollama"]

    def test_clear(self, harbor, harbor_home) -> None:
        harbor("tunnels", "add", "webui")
        assert harbor("tunnels", "clear").exit_code == 0
        assert 'HARBOR_SERVICES_TUNNELS=""' in (harbor_home / ".env").read_text()
