"""Dispatch outcomes and exit-code vocabulary.

Handlers report back in-process with a tagged :class:`DispatchOutcome`;
process exit codes only appear at the outermost boundary via
:attr:`DispatchOutcome.exit_status`.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import StrEnum

UNRECOGNIZED_EXIT_CODE = 42

EXIT_CODE_MESSAGES: dict[int, str] = {
    0: "Process completed successfully",
    1: "General error occurred",
    2: "Misuse of shell builtin",
    126: "Command invoked cannot execute (permission problem or not executable)",
    127: "Command not found",
    128: "Invalid exit argument",
    129: "SIGHUP (Hangup) received",
    130: "SIGINT (Keyboard interrupt) received",
    131: "SIGQUIT (Keyboard quit) received",
    137: "SIGKILL (Kill signal) received",
    143: "SIGTERM (Termination signal) received",
}


class OutcomeKind(StrEnum):
    """Result of one routing attempt."""

    HANDLED = "handled"
    FAILED = "failed"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class DispatchOutcome:
    """Tagged result of invoking a router once."""

    kind: OutcomeKind
    code: int = 0

    @classmethod
    def handled(cls) -> DispatchOutcome:
        return cls(OutcomeKind.HANDLED)

    @classmethod
    def failed(cls, code: int) -> DispatchOutcome:
        return cls(OutcomeKind.FAILED, code)

    @classmethod
    def unrecognized(cls) -> DispatchOutcome:
        return cls(OutcomeKind.UNRECOGNIZED, UNRECOGNIZED_EXIT_CODE)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.HANDLED

    @property
    def exit_status(self) -> int:
        """Process exit status for this outcome.

        A genuine failure never maps onto 0 or the unrecognized sentinel.
        """
        if self.kind is OutcomeKind.HANDLED:
            return 0
        if self.kind is OutcomeKind.UNRECOGNIZED:
            return UNRECOGNIZED_EXIT_CODE
        if self.code in (0, UNRECOGNIZED_EXIT_CODE):
            return 1
        return self.code


def describe_exit_code(code: int) -> str | None:
    """Human-readable diagnostic for a common exit code, if known."""
    return EXIT_CODE_MESSAGES.get(code)


def positional_indexes(
    args: Sequence[str],
    *,
    options_with_values: Collection[str] = (),
) -> list[int]:
    """Indexes of positional tokens in *args*.

    Tokens starting with ``-`` are options. Options named in
    *options_with_values* (without an inline ``=``) consume the next token.
    Everything after a literal ``--`` is positional.
    """
    indexes: list[int] = []
    skip_next = False
    only_positional = False
    for i, token in enumerate(args):
        if skip_next:
            skip_next = False
            continue
        if only_positional:
            indexes.append(i)
            continue
        if token == "--":
            only_positional = True
            continue
        if token.startswith("-") and token != "-":
            if token in options_with_values:
                skip_next = True
            continue
        indexes.append(i)
    return indexes


def swap_positionals(
    args: Sequence[str],
    *,
    options_with_values: Collection[str] = (),
) -> list[str] | None:
    """Swap the first two positional tokens, or None if there are fewer than two.

    Examples:
        >>> swap_positionals(["ollama", "up", "-d"])
        ['up', 'ollama', '-d']
        >>> swap_positionals(["--json", "ls", "tunnels"])
        ['--json', 'tunnels', 'ls']
        >>> swap_positionals(["up"]) is None
        True
    """
    indexes = positional_indexes(args, options_with_values=options_with_values)
    if len(indexes) < 2:
        return None
    first, second = indexes[0], indexes[1]
    swapped = list(args)
    swapped[first], swapped[second] = swapped[second], swapped[first]
    return swapped
