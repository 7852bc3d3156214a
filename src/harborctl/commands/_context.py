"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Owns the env store and the docker engine, builds
services on demand, and centralizes result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from harborctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from harborctl.config.settings import HarborSettings
    from harborctl.infrastructure.engine import DockerEngine
    from harborctl.infrastructure.store import EnvStore
    from harborctl.services.compose import ComposeService
    from harborctl.services.config import ConfigService
    from harborctl.services.endpoints import EndpointService
    from harborctl.services.result import ServiceResult
    from harborctl.services.tunnel import TunnelService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created lazily so ``--help`` and ``--version`` never
    touch the harbor home.
    """

    def __init__(self, settings: HarborSettings) -> None:
        self.settings = settings
        self._store: EnvStore | None = None
        self._engine: DockerEngine | None = None

        from harborctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> EnvStore:
        """The env store, seeded from ``default.env`` on first access."""
        if self._store is None:
            from harborctl.infrastructure.store import EnvStore

            cfg = self.settings.store
            self._store = EnvStore(
                self.settings.env_path,
                defaults_path=self.settings.defaults_path,
                prefix=cfg.prefix,
                delimiter=cfg.delimiter,
            )
            if self._store.ensure():
                click.echo(f"Creating {cfg.env_file} file...", err=True)
        return self._store

    @property
    def engine(self) -> DockerEngine:
        if self._engine is None:
            from harborctl.infrastructure.engine import DockerEngine

            self._engine = DockerEngine(
                self.settings.harbor_home, compose=self.settings.compose.engine
            )
        return self._engine

    # ------------------------------------------------------------------
    # Service factories
    # ------------------------------------------------------------------

    def compose(self) -> ComposeService:
        from harborctl.services.compose import ComposeService

        return ComposeService(self.store, self.settings, engine=self.engine)

    def endpoints(self) -> EndpointService:
        from harborctl.services.endpoints import EndpointService

        return EndpointService(self.store, self.settings, engine=self.engine)

    def tunnels(self) -> TunnelService:
        from harborctl.services.tunnel import TunnelService

        return TunnelService(
            self.store,
            self.settings,
            engine=self.engine,
            compose=self.compose(),
            endpoints=self.endpoints(),
        )

    def config(self) -> ConfigService:
        from harborctl.services.config import ConfigService

        return ConfigService(self.store, self.settings, engine=self.engine)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            raise SystemExit(1)

    def passthrough(self, returncode: int) -> None:
        """Propagate a delegated process' exit code."""
        if returncode != 0:
            raise SystemExit(returncode)
