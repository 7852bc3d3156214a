"""Commands: service URLs, QR codes, and opening them in the browser."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from harborctl.commands._base import HarborCommand
from harborctl.errors import HarborError
from harborctl.services.endpoints import UrlMode
from harborctl.services.result import ServiceResult

if TYPE_CHECKING:
    from harborctl.commands._context import AppContext


@click.command(
    cls=HarborCommand,
    examples="""\
  harbor url webui
  harbor url --lan webui
  harbor url -i ollama""",
)
@click.option(
    "-i",
    "--internal",
    "--intra",
    "mode",
    flag_value=UrlMode.INTERNAL.value,
    help="URL within harbor's docker network.",
)
@click.option(
    "-a",
    "--addressable",
    "--lan",
    "mode",
    flag_value=UrlMode.LAN.value,
    help="(Supposed) LAN URL.",
)
@click.argument("handle", required=False)
@click.pass_obj
def url(app: AppContext, mode: str | None, handle: str | None) -> None:
    """Get the URL for a service (default: ui.main)."""
    app.emit(app.endpoints().url(handle, UrlMode(mode or UrlMode.LOCAL)))


@click.command(name="open", cls=HarborCommand)
@click.argument("handle", required=False)
@click.pass_obj
def open_cmd(app: AppContext, handle: str | None) -> None:
    """Open a service in the default browser."""
    result = app.endpoints().url(handle)
    if result.ok:
        click.launch(result.data["url"])
    app.emit(result)


def show_qr(app: AppContext, text: str) -> None:
    """Print *text* as a QR code; exit non-zero when that fails."""
    try:
        returncode = app.compose().qr(text)
    except HarborError as exc:
        app.emit(ServiceResult.from_exception("qr", exc))
        return
    if returncode != 0:
        click.echo("Failed to print QR code", err=True)
        raise SystemExit(returncode)


@click.command(
    cls=HarborCommand,
    examples="""\
  harbor qr
  harbor qr webui""",
)
@click.argument("handle", required=False)
@click.pass_obj
def qr(app: AppContext, handle: str | None) -> None:
    """Print a QR code for a service's LAN URL."""
    result = app.endpoints().url(handle, UrlMode.LAN)
    app.emit(result)
    show_qr(app, result.data["url"])
