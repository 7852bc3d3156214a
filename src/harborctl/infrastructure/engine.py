"""Docker / docker compose subprocess adapter.

All calls to the container engine go through :class:`DockerEngine` so
services never build ``subprocess`` invocations themselves and tests can
substitute a fake engine.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from harborctl.errors import ContainerNotFound, SpawnError

logger = logging.getLogger(__name__)

_NO_SUCH_CONTAINER = "no such container"


class DockerEngine:
    """Thin wrapper over the ``docker`` CLI, run from the harbor home."""

    def __init__(
        self,
        cwd: Path,
        *,
        compose: Sequence[str] = ("docker", "compose"),
        docker: str = "docker",
    ) -> None:
        self.cwd = cwd
        self.compose = tuple(compose)
        self.docker = docker

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        """Run *args* in the harbor home. Never raises on non-zero exit.

        Raises:
            SpawnError: The executable could not be started.
        """
        logger.debug("exec: %s", " ".join(args))
        try:
            return subprocess.run(
                list(args),
                cwd=self.cwd,
                capture_output=capture,
                text=True,
                check=False,
            )
        except OSError as exc:
            msg = f"Failed to start {args[0]!r}: {exc}"
            raise SpawnError(msg, command=list(args)) from exc

    def compose_run(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess[str]:
        """``docker compose <args>`` without any layer files."""
        return self.run([*self.compose, *args], capture=capture)

    def info(self) -> str:
        """``docker info`` output, or an empty string when docker is unavailable."""
        try:
            proc = self.run([self.docker, "info"], capture=True)
        except SpawnError:
            return ""
        return proc.stdout or ""

    def logs_tail(self, name: str, lines: int) -> str:
        """Last *lines* of a container's output (stdout and stderr merged).

        Raises:
            ContainerNotFound: The container no longer exists.
        """
        proc = self.run([self.docker, "logs", "-n", str(lines), name], capture=True)
        output = (proc.stdout or "") + (proc.stderr or "")
        if proc.returncode != 0 and _NO_SUCH_CONTAINER in output.lower():
            raise ContainerNotFound(f"Container {name!r} not found", container=name)
        return output

    def stop(self, *names: str) -> bool:
        """Stop the named containers. Returns True on success."""
        if not names:
            return True
        proc = self.run([self.docker, "stop", *names], capture=True)
        if proc.returncode != 0:
            logger.warning("docker stop failed: %s", (proc.stderr or "").strip())
        return proc.returncode == 0

    def ps_names(self, name_filter: str) -> list[str]:
        """Names of running containers whose name contains *name_filter*."""
        proc = self.run(
            [self.docker, "ps", "--filter", f"name={name_filter}", "--format", "{{.Names}}"],
            capture=True,
        )
        if proc.returncode != 0:
            return []
        return [line.strip() for line in proc.stdout.splitlines() if line.strip()]

    def port(self, container: str) -> str:
        """Raw ``docker port`` output for *container*.

        Raises:
            ContainerNotFound: docker returned a non-zero status.
        """
        proc = self.run([self.docker, "port", container], capture=True)
        if proc.returncode != 0:
            msg = f"No port mapping for {container!r}: {(proc.stderr or '').strip()}"
            raise ContainerNotFound(msg, container=container)
        return proc.stdout

    def running_services(self) -> list[str]:
        """Compose services currently running in this project."""
        proc = self.compose_run("ps", "--services", "--filter", "status=running", capture=True)
        if proc.returncode != 0:
            return []
        return [line.strip() for line in proc.stdout.splitlines() if line.strip()]

    def active_services(self) -> list[str]:
        """Compose services with a container in any state."""
        proc = self.compose_run("ps", "--format", "{{.Service}}", capture=True)
        if proc.returncode != 0:
            return []
        return [line.strip() for line in proc.stdout.splitlines() if line.strip()]
