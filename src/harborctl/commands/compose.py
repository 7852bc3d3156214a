"""Commands: compose lifecycle passthrough and the resolved ``cmd``.

Every command here resolves a layer plan and hands the rest of the
work to ``docker compose``. Commands that act on the whole stack use
the wildcard so every simple layer is referenced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from harborctl.commands._base import HarborCommand
from harborctl.commands.url import show_qr
from harborctl.errors import HarborError
from harborctl.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from harborctl.commands._context import AppContext

_PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}

ALL = "*"


def _delegate(app: AppContext, op: str, tags: Iterable[str], *action: str) -> int:
    """Run ``<plan for tags> <action>``; report resolution errors as results."""
    try:
        return app.compose().run(tags, *action)
    except HarborError as exc:
        app.emit(ServiceResult.from_exception(op, exc))
        return 1


@click.command(
    cls=HarborCommand,
    context_settings=_PASSTHROUGH,
    examples="""\
  harbor up
  harbor up searxng
  harbor up llamacpp webui""",
)
@click.argument("services", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def up(app: AppContext, services: tuple[str, ...]) -> None:
    """Start the containers (default services plus SERVICES)."""
    app.passthrough(_delegate(app, "up", services, "up", "-d", "--wait"))

    store = app.store
    if store.get("ui.autoopen") == "true":
        result = app.endpoints().url(store.get("ui.main") or None)
        if result.ok:
            click.launch(result.data["url"])

    human = not app.settings.json_output and not app.settings.quiet
    for result in app.tunnels().expose_defaults():
        app.emit(result)
        if human:
            show_qr(app, result.data["public_url"])


@click.command(cls=HarborCommand, context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def down(app: AppContext, args: tuple[str, ...]) -> None:
    """Stop and remove the containers."""
    app.passthrough(_delegate(app, "down", [ALL], "down", "--remove-orphans", *args))


@click.command(cls=HarborCommand, context_settings=_PASSTHROUGH)
@click.argument("services", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def restart(app: AppContext, services: tuple[str, ...]) -> None:
    """Down, then up."""
    app.passthrough(_delegate(app, "restart", [ALL], "down", "--remove-orphans", *services))
    app.passthrough(_delegate(app, "restart", services, "up", "-d"))


@click.command(cls=HarborCommand)
@click.pass_obj
def ps(app: AppContext) -> None:
    """List the running containers."""
    app.passthrough(_delegate(app, "ps", [ALL], "ps"))


@click.command(
    cls=HarborCommand,
    context_settings=_PASSTHROUGH,
    examples="""\
  harbor logs
  harbor logs ollama
  harbor logs webui -n 100""",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def logs(app: AppContext, args: tuple[str, ...]) -> None:
    """Follow the logs of the containers."""
    app.passthrough(_delegate(app, "logs", [ALL], "logs", "-n", "20", "-f", *args))


@click.command(cls=HarborCommand)
@click.argument("services", nargs=-1)
@click.pass_obj
def pull(app: AppContext, services: tuple[str, ...]) -> None:
    """Pull the latest images."""
    app.passthrough(_delegate(app, "pull", services, "pull"))


@click.command(cls=HarborCommand, context_settings=_PASSTHROUGH)
@click.argument("service")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def build(app: AppContext, service: str, args: tuple[str, ...]) -> None:
    """Build the given service."""
    app.passthrough(_delegate(app, "build", [ALL], "build", service, *args))


@click.command(cls=HarborCommand)
@click.argument("service")
@click.pass_obj
def shell(app: AppContext, service: str) -> None:
    """Load a bash shell in the service's main container."""
    app.passthrough(
        _delegate(app, "shell", [ALL], "run", "-it", "--entrypoint", "bash", service)
    )


@click.command(name="run", cls=HarborCommand, context_settings=_PASSTHROUGH)
@click.argument("service")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run_cmd(app: AppContext, service: str, args: tuple[str, ...]) -> None:
    """Run a one-off command in a service container."""
    try:
        active = app.engine.active_services()
    except HarborError as exc:
        app.emit(ServiceResult.from_exception("run", exc))
        return
    app.passthrough(_delegate(app, "run", [*active, service], "run", "--rm", service, *args))


@click.command(name="exec", cls=HarborCommand, context_settings=_PASSTHROUGH)
@click.argument("service")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def exec_cmd(app: AppContext, service: str, command: tuple[str, ...]) -> None:
    """Execute a command in a running service."""
    try:
        running = app.engine.running_services()
        if service in running:
            returncode = app.engine.compose_run("exec", service, *command).returncode
    except HarborError as exc:
        app.emit(ServiceResult.from_exception("exec", exc))
        return
    if service not in running:
        click.echo(
            f"Harbor {service} is not running. "
            f"Please start it with 'harbor up {service}' first.",
            err=True,
        )
        raise SystemExit(1)
    app.passthrough(returncode)


@click.command(cls=HarborCommand)
@click.argument("services", nargs=-1)
@click.pass_obj
def eject(app: AppContext, services: tuple[str, ...]) -> None:
    """Print the merged compose configuration for SERVICES."""
    app.passthrough(_delegate(app, "eject", services, "config"))


@click.command(
    cls=HarborCommand,
    examples="""\
  harbor cmd
  harbor cmd ollama webui
  harbor cmd --human searxng
  harbor cmd --dir=/opt/stack ollama
  $(harbor cmd ollama) config --services""",
)
@click.option("-h", "--human", is_flag=True, help="One referenced layer per line.")
@click.option(
    "--dir",
    "base_dir",
    default=None,
    help="Layer directory (default: harbor home).",
)
@click.argument("services", nargs=-1)
@click.pass_obj
def cmd(app: AppContext, human: bool, base_dir: str | None, services: tuple[str, ...]) -> None:
    """Print the docker compose command for SERVICES."""
    app.emit(app.compose().command(services, base_dir=base_dir, human=human))


@click.command(name="ls", cls=HarborCommand)
@click.option("-a", "--active", is_flag=True, help="Only services with running containers.")
@click.pass_obj
def ls_cmd(app: AppContext, active: bool) -> None:
    """List available (or active) services."""
    svc = app.compose()
    app.emit(svc.active() if active else svc.services())
