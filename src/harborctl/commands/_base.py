"""Custom Click base classes: --examples, command aliases, and the
unrecognized-command signal used by the dispatch retry.

``HarborGroup`` raises :class:`UnrecognizedCommand` instead of a plain
usage error when the first token names no subcommand. The root entry
point catches it to try the swapped argument order; everywhere else it
behaves like Click's own "No such command" usage error.
"""

from __future__ import annotations

from typing import Any

import click


class UnrecognizedCommand(click.UsageError):
    """No command (or alias) matches the given name."""

    def __init__(self, name: str, ctx: click.Context | None = None) -> None:
        super().__init__(f"No such command {name!r}.", ctx=ctx)
        self.name = name


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class HarborCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class HarborGroup(click.Group):
    """Click Group with ``--examples``, aliases, and unrecognized signalling.

    Register aliases with ``group.add_command(cmd, aliases=["u"])``.
    """

    command_class = HarborCommand
    group_class = type

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.aliases: dict[str, str] = {}
        if examples:
            _add_examples_option(self, examples)

    def add_command(
        self,
        cmd: click.Command,
        name: str | None = None,
        *,
        aliases: list[str] | None = None,
    ) -> None:
        super().add_command(cmd, name)
        for alias in aliases or []:
            self.aliases[alias] = name or cmd.name or alias

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is None and cmd_name in self.aliases:
            cmd = super().get_command(ctx, self.aliases[cmd_name])
        return cmd

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = click.utils.make_str(args[0])
        if (
            not cmd_name.startswith("-")
            and not ctx.resilient_parsing
            and self.get_command(ctx, cmd_name) is None
        ):
            raise UnrecognizedCommand(cmd_name, ctx=ctx)
        _, cmd, rest = super().resolve_command(ctx, args)
        # Report the canonical name so aliases show the real command path.
        return (cmd.name if cmd else None), cmd, rest

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """List commands with their aliases, e.g. ``up (u)``."""
        by_target: dict[str, list[str]] = {}
        for alias, target in self.aliases.items():
            by_target.setdefault(target, []).append(alias)

        rows: list[tuple[str, str]] = []
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            label = name
            if name in by_target:
                label = f"{name} ({', '.join(sorted(by_target[name]))})"
            rows.append((label, cmd.get_short_help_str(limit=formatter.width - 6 - len(label))))
        if rows:
            with formatter.section("Commands"):
                formatter.write_dl(rows)
