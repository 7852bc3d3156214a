"""Root CLI group for harbor with global flags, command registration,
and the console-script entry point.

``main()`` routes every invocation through the dispatch retry: when the
first positional names no command, the first two positionals are swapped
and the CLI is invoked once more (``harbor webui logs`` works like
``harbor logs webui``).
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import click

from harborctl import __version__
from harborctl.commands import register_commands
from harborctl.commands._base import HarborGroup, UnrecognizedCommand
from harborctl.commands._context import AppContext
from harborctl.config.settings import HarborSettings
from harborctl.domain.dispatch import DispatchOutcome
from harborctl.errors import HarborError
from harborctl.services.dispatch import DispatchController

PROG_NAME = "harbor"


@click.group(cls=HarborGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--home",
    "harbor_home",
    default=None,
    envvar="HARBOR_HOME",
    type=click.Path(file_okay=False, path_type=Path),
    help="Harbor home (layer files and .env).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    harbor_home: Path | None,
) -> None:
    """harbor — compose layered container services."""
    settings = HarborSettings.from_cli(
        config_path=config_path,
        harbor_home=harbor_home,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _exit_outcome(code: object) -> DispatchOutcome:
    if code is None or code == 0:
        return DispatchOutcome.handled()
    if isinstance(code, int):
        return DispatchOutcome.failed(code)
    click.echo(str(code), err=True)
    return DispatchOutcome.failed(1)


def route(args: list[str]) -> DispatchOutcome:
    """Invoke the CLI once and classify how it ended."""
    try:
        rv = cli.main(args=args, prog_name=PROG_NAME, standalone_mode=False)
    except UnrecognizedCommand:
        return DispatchOutcome.unrecognized()
    except click.ClickException as exc:
        exc.show()
        return DispatchOutcome.failed(exc.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        return DispatchOutcome.failed(130)
    except HarborError as exc:
        click.echo(f"ERROR: {exc.message}", err=True)
        return DispatchOutcome.failed(1)
    except SystemExit as exc:
        return _exit_outcome(exc.code)
    # Without standalone mode, ctx.exit(n) surfaces as the return value.
    return _exit_outcome(rv if isinstance(rv, int) else 0)


def show_help() -> None:
    with click.Context(cli, info_name=PROG_NAME) as ctx:
        click.echo(ctx.get_help())


def value_options(group: click.Command) -> set[str]:
    """Root option names that consume the following token."""
    names: set[str] = set()
    for param in group.params:
        if isinstance(param, click.Option) and not param.is_flag and not param.count:
            names.update(param.opts)
            names.update(param.secondary_opts)
    return names


def main(argv: Sequence[str] | None = None) -> None:
    """Console-script entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    controller = DispatchController(
        route,
        show_help=show_help,
        prog_name=PROG_NAME,
        options_with_values=value_options(cli),
    )
    sys.exit(controller.dispatch(args))
