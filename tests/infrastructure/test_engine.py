"""Tests for the docker subprocess adapter."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from harborctl.errors import ContainerNotFound, SpawnError
from harborctl.infrastructure.engine import DockerEngine


def _proc(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def docker(tmp_path: Path) -> DockerEngine:
    return DockerEngine(tmp_path)


class TestRun:
    def test_runs_in_harbor_home(self, docker: DockerEngine, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_proc()) as run:
            docker.run(["docker", "ps"], capture=True)
        args, kwargs = run.call_args
        assert args[0] == ["docker", "ps"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    def test_missing_executable(self, docker: DockerEngine) -> None:
        with (
            patch("subprocess.run", side_effect=FileNotFoundError("docker")),
            pytest.raises(SpawnError) as exc_info,
        ):
            docker.run(["docker", "ps"])
        assert exc_info.value.code == "SPAWN_FAILED"
        assert exc_info.value.detail["command"] == ["docker", "ps"]

    def test_compose_prefix(self, tmp_path: Path) -> None:
        engine = DockerEngine(tmp_path, compose=["podman-compose"])
        with patch("subprocess.run", return_value=_proc()) as run:
            engine.compose_run("ps")
        assert run.call_args.args[0] == ["podman-compose", "ps"]


class TestInfo:
    def test_output(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(stdout="Runtimes: runc\n")):
            assert docker.info() == "Runtimes: runc\n"

    def test_docker_missing(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError("docker")):
            assert docker.info() == ""


class TestLogsTail:
    def test_merges_streams(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(stdout="out\n", stderr="err\n")) as run:
            assert docker.logs_tail("c1", 200) == "out\nerr\n"
        assert run.call_args.args[0] == ["docker", "logs", "-n", "200", "c1"]

    def test_container_gone(self, docker: DockerEngine) -> None:
        proc = _proc(1, stderr="Error response from daemon: No such container: c1\n")
        with patch("subprocess.run", return_value=proc), pytest.raises(ContainerNotFound):
            docker.logs_tail("c1", 200)


class TestStop:
    def test_no_names_is_noop(self, docker: DockerEngine) -> None:
        with patch("subprocess.run") as run:
            assert docker.stop() is True
        run.assert_not_called()

    def test_stops_all_in_one_call(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc()) as run:
            assert docker.stop("a", "b") is True
        assert run.call_args.args[0] == ["docker", "stop", "a", "b"]

    def test_failure(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(1, stderr="boom")):
            assert docker.stop("a") is False


class TestQueries:
    def test_ps_names(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(stdout="a\n\nb\n")) as run:
            assert docker.ps_names("harbor.cfd.tunnel") == ["a", "b"]
        argv = run.call_args.args[0]
        assert "name=harbor.cfd.tunnel" in argv
        assert "{{.Names}}" in argv

    def test_ps_names_failure(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(1)):
            assert docker.ps_names("x") == []

    def test_port(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(stdout="8080/tcp -> 0.0.0.0:33801\n")):
            assert docker.port("harbor.webui") == "8080/tcp -> 0.0.0.0:33801\n"

    def test_port_missing_container(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(1, stderr="No such container")):
            with pytest.raises(ContainerNotFound) as exc_info:
                docker.port("harbor.webui")
        assert exc_info.value.code == "UNAVAILABLE"

    def test_running_services(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(stdout="ollama\nwebui\n")) as run:
            assert docker.running_services() == ["ollama", "webui"]
        assert run.call_args.args[0][:3] == ["docker", "compose", "ps"]

    def test_active_services_failure(self, docker: DockerEngine) -> None:
        with patch("subprocess.run", return_value=_proc(1)):
            assert docker.active_services() == []
