"""DispatchController — one-shot argument-order retry around a router.

``harbor ollama logs`` and ``harbor logs ollama`` should both work. When
the router reports that the first positional names no command, the
controller swaps the first two positionals and routes exactly once more.
A genuine failure is never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence

import click

from harborctl.domain.dispatch import (
    DispatchOutcome,
    OutcomeKind,
    describe_exit_code,
    positional_indexes,
    swap_positionals,
)

logger = logging.getLogger(__name__)

Router = Callable[[list[str]], DispatchOutcome]


def _echo_err(message: str) -> None:
    click.echo(message, err=True)


class DispatchController:
    """Routes an argv, retrying once with swapped positionals on ``unrecognized``."""

    def __init__(
        self,
        router: Router,
        *,
        show_help: Callable[[], None],
        prog_name: str = "harbor",
        options_with_values: Collection[str] = (),
        echo: Callable[[str], None] = _echo_err,
    ) -> None:
        self._router = router
        self._show_help = show_help
        self._prog_name = prog_name
        self._options_with_values = options_with_values
        self._echo = echo

    def dispatch(self, args: Sequence[str]) -> int:
        """Route *args* and return the process exit status."""
        args = list(args)
        outcome = self._router(args)
        if outcome.kind is not OutcomeKind.UNRECOGNIZED:
            return outcome.exit_status

        swapped = swap_positionals(args, options_with_values=self._options_with_values)
        if swapped is None:
            logger.debug("Unrecognized command, nothing to swap: %s", args)
            self._show_help()
            return 1

        first, second = (args[i] for i in self._first_two(args))
        self._echo(
            f"'{self._prog_name} {first} {second}' failed, "
            f"trying '{self._prog_name} {second} {first}'..."
        )
        logger.info("Retrying with swapped arguments: %s", swapped)

        retry = self._router(swapped)
        if retry.ok:
            return 0
        if retry.kind is OutcomeKind.UNRECOGNIZED:
            # Neither order names a command; the sentinel stays internal.
            self._show_help()
            return 1

        message = describe_exit_code(retry.code)
        if message is None:
            self._echo(f"Exit code: {retry.code}")
            self._show_help()
        else:
            self._echo(message)
        return retry.exit_status

    def _first_two(self, args: Sequence[str]) -> list[int]:
        return positional_indexes(args, options_with_values=self._options_with_values)[:2]
