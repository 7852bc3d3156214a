"""Commands: the persisted HARBOR_* configuration and default services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from harborctl.commands._base import HarborGroup
from harborctl.commands._lists import register_list_commands, show_list_by_default
from harborctl.services.compose import DEFAULT_SERVICES_KEY

if TYPE_CHECKING:
    from harborctl.commands._context import AppContext


@click.group(
    cls=HarborGroup,
    examples="""\
  harbor config ls
  harbor config get webui.host.port
  harbor config set webui.host.port 33801
  harbor config reset""",
)
def config() -> None:
    """Manage the harbor environment configuration."""


@config.command(name="ls")
@click.pass_obj
def config_ls(app: AppContext) -> None:
    """All config values."""
    app.emit(app.config().items())


@config.command(name="get")
@click.argument("key")
@click.pass_obj
def config_get(app: AppContext, key: str) -> None:
    """Get a specific config value."""
    app.emit(app.config().get(key))


@config.command(name="set")
@click.argument("key")
@click.argument("value", nargs=-1, required=True)
@click.pass_obj
def config_set(app: AppContext, key: str, value: tuple[str, ...]) -> None:
    """Set a config value (remaining arguments are joined with spaces)."""
    app.emit(app.config().set(key, " ".join(value)))


@config.command(name="reset")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def config_reset(app: AppContext, yes: bool) -> None:
    """Reset the configuration to default.env."""
    if not yes and not click.confirm("Are you sure you want to reset Harbor configuration?"):
        click.echo("Reset cancelled", err=True)
        return
    app.emit(app.config().reset())


config.aliases["list"] = "ls"  # type: ignore[attr-defined]


@click.group(
    cls=HarborGroup,
    invoke_without_command=True,
    examples="""\
  harbor defaults
  harbor defaults add searxng
  harbor defaults rm ollama
  harbor defaults rm 1""",
)
@click.pass_context
def defaults(ctx: click.Context) -> None:
    """Manage the services started by default."""
    show_list_by_default(ctx, DEFAULT_SERVICES_KEY)


register_list_commands(defaults, DEFAULT_SERVICES_KEY)
