"""ComposeService — the layer resolution engine.

Given a layer directory and a set of active tags, decides which compose
files to combine and in what order, then assembles the delegate
``docker compose -f ... -f ...`` command.

Resolution steps (re-run from scratch on every call, nothing cached):

1. Discover layer files directly inside the directory (non-recursive).
2. Build the option set: default tags from the store, explicit tags,
   and the synthetic GPU tag when the host probe succeeds.
3. Base layer first, then matched layers ascending by specificity
   (ties by file name).
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from harborctl.domain.layers import Layer, OptionSet, parse_layer, select_layers
from harborctl.errors import ConfigurationError, HarborError
from harborctl.infrastructure.hardware import detect_gpu
from harborctl.services.base import BaseService
from harborctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from harborctl.config.settings import HarborSettings
    from harborctl.infrastructure.engine import DockerEngine
    from harborctl.infrastructure.store import EnvStore

log = structlog.get_logger(__name__)

DEFAULT_SERVICES_KEY = "services.default"


@dataclass(frozen=True)
class ResolvedPlan:
    """Ordered layer files plus the engine invocation that consumes them."""

    layers: tuple[Path, ...]
    options: tuple[str, ...] = ()
    engine: tuple[str, ...] = ("docker", "compose")

    def args(self, *action: str) -> list[str]:
        """Full argv: engine, one ``-f`` per layer in merge order, then *action*."""
        argv = list(self.engine)
        for layer in self.layers:
            argv.extend(["-f", str(layer)])
        argv.extend(action)
        return argv

    @property
    def command(self) -> str:
        return shlex.join(self.args())

    def render(self, *, human: bool = False, root: Path | None = None) -> str:
        """Machine form (the command string) or one layer per line.

        Human form lists each layer relative to *root* when it lives
        under it. The plan itself is unchanged.
        """
        if not human:
            return self.command
        lines = [" ".join(self.engine)]
        for layer in self.layers:
            shown = layer
            if root is not None and layer.is_relative_to(root):
                shown = layer.relative_to(root)
            lines.append(f" - {shown}")
        return "\n".join(lines)


class ComposeService(BaseService):
    """Resolves layer plans and delegates compose actions."""

    def __init__(
        self,
        store: EnvStore,
        settings: HarborSettings,
        *,
        engine: DockerEngine | None = None,
        gpu_probe: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(store, settings, engine=engine)
        self._gpu_probe = gpu_probe or (lambda: detect_gpu(self._engine))

    def _layer_dir(self, base_dir: Path | str | None) -> Path:
        if base_dir is None:
            return self._settings.harbor_home
        path = Path(base_dir).expanduser()
        if not path.is_absolute():
            path = self._settings.harbor_home / path
        return path

    def discover(self, base_dir: Path) -> list[Layer]:
        """Layer files directly inside *base_dir*, in listing order.

        Raises:
            ConfigurationError: The directory is missing or unreadable.
        """
        cfg = self._settings.compose
        if not base_dir.is_dir():
            msg = f"Layer directory not accessible: {base_dir}"
            raise ConfigurationError(msg, path=str(base_dir))
        try:
            entries = list(base_dir.iterdir())
        except OSError as exc:
            msg = f"Layer directory not accessible: {base_dir}: {exc}"
            raise ConfigurationError(msg, path=str(base_dir)) from exc

        layers: list[Layer] = []
        for entry in entries:
            if not entry.is_file():
                continue
            layer = parse_layer(
                entry,
                base_name=cfg.base_file,
                prefix=cfg.prefix,
                cross_marker=cfg.cross_marker,
                suffix=cfg.suffix,
            )
            if layer is not None:
                layers.append(layer)
        return layers

    def options(self, tags: Iterable[str] = ()) -> OptionSet:
        """Active option set for one pass; probes the GPU every time."""
        cfg = self._settings.compose
        return OptionSet.build(
            tags,
            self._store.list(DEFAULT_SERVICES_KEY),
            gpu=self._gpu_probe(),
            gpu_tag=cfg.gpu_tag,
            wildcard=cfg.wildcard,
        )

    def resolve(
        self,
        base_dir: Path | str | None = None,
        tags: Iterable[str] = (),
    ) -> ResolvedPlan:
        """Resolve the ordered layer list for *tags*.

        The base layer is always first, even when it is missing on disk.
        Matching no other layer is not an error.
        """
        layer_dir = self._layer_dir(base_dir)
        discovered = self.discover(layer_dir)
        options = self.options(tags)
        selected = select_layers(discovered, options)
        base = layer_dir / self._settings.compose.base_file
        plan = ResolvedPlan(
            layers=(base, *(layer.path for layer in selected)),
            options=options.tags,
            engine=tuple(self._settings.compose.engine),
        )
        log.debug(
            "resolved layers",
            base_dir=str(layer_dir),
            options=list(options.tags),
            layers=[p.name for p in plan.layers],
        )
        return plan

    def command(
        self,
        tags: Iterable[str] = (),
        *,
        base_dir: Path | str | None = None,
        human: bool = False,
    ) -> ServiceResult:
        """Render the delegate command for ``harbor cmd``."""
        try:
            plan = self.resolve(base_dir, tags)
        except HarborError as exc:
            return ServiceResult.from_exception("cmd", exc)
        return ServiceResult(
            ok=True,
            op="cmd",
            data={
                "command": plan.render(human=human, root=self._settings.harbor_home),
                "layers": [str(p) for p in plan.layers],
                "options": list(plan.options),
            },
        )

    def run(
        self,
        tags: Iterable[str],
        *action: str,
        base_dir: Path | str | None = None,
    ) -> int:
        """Resolve a plan for *tags* and run ``<plan> <action>``.

        Output is streamed to the terminal. Returns the process exit code.
        """
        plan = self.resolve(base_dir, tags)
        return self._engine.run(plan.args(*action)).returncode

    def qr(self, text: str) -> int:
        """Render *text* as a terminal QR code through the QR compose service."""
        service = self._settings.compose.qr_service
        return self.run([service], "run", "--rm", service, text)

    def services(self) -> ServiceResult:
        """All services defined across every layer (``ls``)."""
        try:
            plan = self.resolve(tags=[self._settings.compose.wildcard])
            proc = self._engine.run(plan.args("config", "--services"), capture=True)
        except HarborError as exc:
            return ServiceResult.from_exception("ls", exc)
        if proc.returncode != 0:
            return ServiceResult.failure(
                "ls",
                ErrorCode.UNAVAILABLE,
                f"docker compose config failed: {(proc.stderr or '').strip()}",
                returncode=proc.returncode,
            )
        items = sorted({line.strip() for line in proc.stdout.splitlines() if line.strip()})
        return ServiceResult(ok=True, op="ls", data={"count": len(items), "items": items})

    def active(self) -> ServiceResult:
        """Services with a container in this project (``ls --active``)."""
        try:
            items = self._engine.active_services()
        except HarborError as exc:
            return ServiceResult.from_exception("ls", exc)
        return ServiceResult(ok=True, op="ls", data={"count": len(items), "items": items})
