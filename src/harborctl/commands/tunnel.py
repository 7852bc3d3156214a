"""Commands: expose services via tunnels, and the auto-tunnel list."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from harborctl.commands._base import HarborCommand, HarborGroup
from harborctl.commands._lists import register_list_commands, show_list_by_default
from harborctl.commands.url import show_qr
from harborctl.services.tunnel import DEFAULT_TUNNELS_KEY

if TYPE_CHECKING:
    from harborctl.commands._context import AppContext

_STOP_WORDS = frozenset({"down", "stop", "d", "s"})


@click.command(
    cls=HarborCommand,
    examples="""\
  harbor tunnel webui
  harbor tunnel down
  harbor --json tunnel ollama""",
)
@click.argument("handle")
@click.pass_obj
def tunnel(app: AppContext, handle: str) -> None:
    """Expose HANDLE to the internet, or stop all tunnels (down|stop)."""
    svc = app.tunnels()
    if handle in _STOP_WORDS:
        app.emit(svc.teardown_all())
        return
    human = not app.settings.json_output and not app.settings.quiet
    if human:
        click.echo(f"Starting new tunnel for {handle}...", err=True)
    result = svc.expose(handle)
    app.emit(result)
    if human:
        show_qr(app, result.data["public_url"])


@click.group(
    cls=HarborGroup,
    invoke_without_command=True,
    examples="""\
  harbor tunnels
  harbor tunnels add webui
  harbor tunnels rm webui
  harbor tunnels rm 0
  harbor tunnels clear""",
)
@click.pass_context
def tunnels(ctx: click.Context) -> None:
    """Manage services that are tunneled automatically on 'up'."""
    show_list_by_default(ctx, DEFAULT_TUNNELS_KEY)


register_list_commands(tunnels, DEFAULT_TUNNELS_KEY)
