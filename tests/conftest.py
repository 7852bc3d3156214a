"""Shared pytest fixtures and test doubles for harborctl tests."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Generator, Sequence
from pathlib import Path
from unittest.mock import PropertyMock, patch

import pytest
from click.testing import CliRunner, Result

from harborctl.config.settings import HarborSettings
from harborctl.infrastructure.engine import DockerEngine
from harborctl.infrastructure.store import EnvStore

DEFAULT_ENV = """\
HARBOR_CONTAINER_PREFIX="harbor"
HARBOR_SERVICES_DEFAULT="ollama;webui"
HARBOR_SERVICES_TUNNELS=""
HARBOR_UI_MAIN="webui"
HARBOR_UI_AUTOOPEN="false"
"""

LAYER_FILES = (
    "compose.yml",
    "compose.ollama.yml",
    "compose.webui.yml",
    "compose.searxng.yml",
    "compose.cfd.yml",
    "compose.x.webui.ollama.yml",
    "compose.x.webui.searxng.yml",
    "compose.nvidia.ollama.yml",
)

Handler = Callable[[list[str]], subprocess.CompletedProcess[str]]


class FakeEngine(DockerEngine):
    """DockerEngine that records argv and answers from scripted responses.

    Only :meth:`run` is replaced, so the parsing in the real helpers
    (``ps_names``, ``port``, ``logs_tail``...) is still exercised.
    """

    def __init__(self, cwd: Path) -> None:
        super().__init__(cwd)
        self.calls: list[list[str]] = []
        self._responses: list[tuple[tuple[str, ...], Handler]] = []

    def respond(
        self,
        *pattern: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        handler: Handler | None = None,
    ) -> None:
        """Answer any argv containing *pattern* as a contiguous run of tokens.

        Later registrations win over earlier ones.
        """

        def _reply(argv: list[str]) -> subprocess.CompletedProcess[str]:
            return subprocess.CompletedProcess(argv, returncode, stdout=stdout, stderr=stderr)

        self._responses.insert(0, (pattern, handler or _reply))

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        argv = list(args)
        self.calls.append(argv)
        for pattern, handler in self._responses:
            if _contains(argv, pattern):
                return handler(argv)
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

    def calls_with(self, *pattern: str) -> list[list[str]]:
        return [argv for argv in self.calls if _contains(argv, pattern)]


def _contains(argv: list[str], pattern: tuple[str, ...]) -> bool:
    n = len(pattern)
    return any(tuple(argv[i : i + n]) == pattern for i in range(len(argv) - n + 1))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own harbor setup out of the tests."""
    for var in ("HARBORCTL_CONFIG", "HARBOR_HOME"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """AppContext reconfigures logging on every invocation; undo it."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("harborctl")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def harbor_home(tmp_path: Path) -> Path:
    """Harbor home with a small set of layer files and a default.env."""
    home = tmp_path / "harbor"
    home.mkdir()
    for name in LAYER_FILES:
        (home / name).write_text("services: {}\n", encoding="utf-8")
    (home / "README.md").write_text("not a layer\n", encoding="utf-8")
    (home / "default.env").write_text(DEFAULT_ENV, encoding="utf-8")
    return home


@pytest.fixture
def settings(harbor_home: Path) -> HarborSettings:
    return HarborSettings.from_cli(harbor_home=harbor_home)


@pytest.fixture
def store(settings: HarborSettings) -> EnvStore:
    """Env store seeded from default.env."""
    s = EnvStore(settings.env_path, defaults_path=settings.defaults_path)
    s.ensure()
    return s


@pytest.fixture
def engine(harbor_home: Path) -> FakeEngine:
    return FakeEngine(harbor_home)


@pytest.fixture
def fake_cli_engine(engine: FakeEngine) -> Generator[FakeEngine]:
    """Route every CLI invocation's docker calls to *engine*."""
    from harborctl.commands._context import AppContext

    with patch.object(AppContext, "engine", new_callable=PropertyMock, return_value=engine):
        yield engine


@pytest.fixture
def no_gpu() -> Generator[None]:
    """Pretend the host has no NVIDIA driver."""
    with patch("harborctl.infrastructure.hardware.has_nvidia_driver", return_value=False):
        yield


@pytest.fixture
def harbor(
    cli_runner: CliRunner, harbor_home: Path, fake_cli_engine: FakeEngine, no_gpu: None
) -> Callable[..., Result]:
    """Invoke the CLI against *harbor_home* with docker faked out."""
    from harborctl.cli import cli

    def invoke(*args: str, **kwargs: object) -> Result:
        return cli_runner.invoke(cli, ["--home", str(harbor_home), *args], **kwargs)

    return invoke
