"""Commands: version, help, home, and GPU status."""

from __future__ import annotations

import shutil
import subprocess
from typing import TYPE_CHECKING

import click

from harborctl import __version__
from harborctl.commands._base import HarborCommand

if TYPE_CHECKING:
    from harborctl.commands._context import AppContext


@click.command(cls=HarborCommand)
def version() -> None:
    """Show the CLI version."""
    click.echo(f"Harbor CLI version: {__version__}")


@click.command(name="help", cls=HarborCommand)
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """Show this help message."""
    assert ctx.parent is not None
    click.echo(ctx.parent.get_help())


@click.command(cls=HarborCommand)
@click.pass_obj
def home(app: AppContext) -> None:
    """Print the harbor home directory."""
    click.echo(str(app.settings.harbor_home))


@click.command(cls=HarborCommand)
def smi() -> None:
    """Show NVIDIA GPU information."""
    if shutil.which("nvidia-smi") is None:
        click.echo("nvidia-smi not found.", err=True)
        raise SystemExit(1)
    raise SystemExit(subprocess.run(["nvidia-smi"], check=False).returncode)
