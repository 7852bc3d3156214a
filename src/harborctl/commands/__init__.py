"""Subcommand modules for harbor.

Provides register_commands() which uses deferred imports to keep
``harbor --help`` fast as the command set grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harborctl.commands._base import HarborGroup


def register_commands(cli: HarborGroup) -> None:
    """Register all commands, groups, and their aliases on the root group."""
    # --- Compose passthrough ---
    from harborctl.commands.compose import (
        build,
        cmd,
        down,
        eject,
        exec_cmd,
        logs,
        ls_cmd,
        ps,
        pull,
        restart,
        run_cmd,
        shell,
        up,
    )

    cli.add_command(up, aliases=["u"])
    cli.add_command(down, aliases=["d"])
    cli.add_command(restart, aliases=["r"])
    cli.add_command(ps)
    cli.add_command(logs, aliases=["l"])
    cli.add_command(pull)
    cli.add_command(build)
    cli.add_command(shell)
    cli.add_command(run_cmd)
    cli.add_command(exec_cmd)
    cli.add_command(eject)
    cli.add_command(cmd)
    cli.add_command(ls_cmd, aliases=["list"])

    # --- Exposure ---
    from harborctl.commands.tunnel import tunnel, tunnels
    from harborctl.commands.url import open_cmd, qr, url

    cli.add_command(tunnel, aliases=["t"])
    cli.add_command(tunnels)
    cli.add_command(url)
    cli.add_command(open_cmd, aliases=["o"])
    cli.add_command(qr)

    # --- Configuration ---
    from harborctl.commands.config_cmd import config, defaults

    cli.add_command(config)
    cli.add_command(defaults)

    # --- Misc ---
    from harborctl.commands.system import help_cmd, home, smi, version

    cli.add_command(version)
    cli.add_command(help_cmd)
    cli.add_command(home)
    cli.add_command(smi)
