"""Shared ``ls | add | rm | clear`` subcommands for list-valued config keys."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from harborctl.commands._base import HarborGroup
    from harborctl.commands._context import AppContext


def register_list_commands(group: HarborGroup, key: str) -> None:
    """Attach ``ls``, ``add``, ``rm`` and ``clear`` for the list under *key*."""

    @group.command(name="ls")
    @click.pass_obj
    def ls_values(app: AppContext) -> None:
        """List all values."""
        app.emit(app.config().list_values(key))

    @group.command(name="add")
    @click.argument("value")
    @click.pass_obj
    def add_value(app: AppContext, value: str) -> None:
        """Add a value."""
        app.emit(app.config().add(key, value))

    @group.command(name="rm")
    @click.argument("value", required=False)
    @click.pass_obj
    def rm_value(app: AppContext, value: str | None) -> None:
        """Remove a value, by value or index (all values if omitted)."""
        app.emit(app.config().remove(key, value))

    @group.command(name="clear")
    @click.pass_obj
    def clear_values(app: AppContext) -> None:
        """Remove all values."""
        app.emit(app.config().remove(key))

    group.aliases["list"] = "ls"


def show_list_by_default(ctx: click.Context, key: str) -> None:
    """Group callback body: list the values when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        app: AppContext = ctx.obj
        app.emit(app.config().list_values(key))
