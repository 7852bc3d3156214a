"""Tests for dispatch outcomes, exit-code diagnostics, and argument swapping."""

from __future__ import annotations

import pytest

from harborctl.domain.dispatch import (
    UNRECOGNIZED_EXIT_CODE,
    DispatchOutcome,
    OutcomeKind,
    describe_exit_code,
    positional_indexes,
    swap_positionals,
)


class TestDispatchOutcome:
    def test_handled(self) -> None:
        outcome = DispatchOutcome.handled()
        assert outcome.ok
        assert outcome.exit_status == 0

    def test_unrecognized_carries_sentinel(self) -> None:
        outcome = DispatchOutcome.unrecognized()
        assert outcome.kind is OutcomeKind.UNRECOGNIZED
        assert not outcome.ok
        assert outcome.exit_status == UNRECOGNIZED_EXIT_CODE == 42

    def test_failed_keeps_code(self) -> None:
        assert DispatchOutcome.failed(127).exit_status == 127

    @pytest.mark.parametrize("code", [0, UNRECOGNIZED_EXIT_CODE])
    def test_failure_never_reports_success_or_sentinel(self, code: int) -> None:
        assert DispatchOutcome.failed(code).exit_status == 1


class TestDescribeExitCode:
    @pytest.mark.parametrize(
        ("code", "fragment"),
        [
            (1, "General error"),
            (126, "cannot execute"),
            (127, "Command not found"),
            (130, "SIGINT"),
            (137, "SIGKILL"),
            (143, "SIGTERM"),
        ],
    )
    def test_known(self, code: int, fragment: str) -> None:
        message = describe_exit_code(code)
        assert message is not None
        assert fragment in message

    def test_unknown(self) -> None:
        assert describe_exit_code(3) is None
        assert describe_exit_code(UNRECOGNIZED_EXIT_CODE) is None


class TestPositionalIndexes:
    def test_skips_flags(self) -> None:
        assert positional_indexes(["--json", "ls", "-q", "tunnels"]) == [1, 3]

    def test_value_options_consume_next_token(self) -> None:
        args = ["--home", "/opt/harbor", "webui", "url"]
        assert positional_indexes(args, options_with_values={"--home"}) == [2, 3]

    def test_inline_value_does_not_consume(self) -> None:
        args = ["--home=/opt/harbor", "webui", "url"]
        assert positional_indexes(args, options_with_values={"--home"}) == [1, 2]

    def test_double_dash(self) -> None:
        assert positional_indexes(["--", "-x", "y"]) == [1, 2]

    def test_single_dash_is_positional(self) -> None:
        assert positional_indexes(["-", "a"]) == [0, 1]


class TestSwapPositionals:
    def test_swaps_first_two(self) -> None:
        assert swap_positionals(["ollama", "logs"]) == ["logs", "ollama"]

    def test_keeps_the_rest_in_place(self) -> None:
        assert swap_positionals(["webui", "logs", "-n", "10", "extra"]) == [
            "logs",
            "webui",
            "-n",
            "10",
            "extra",
        ]

    def test_leaves_flags_in_place(self) -> None:
        args = ["-c", "h.toml", "webui", "--json", "url"]
        swapped = swap_positionals(args, options_with_values={"-c"})
        assert swapped == ["-c", "h.toml", "url", "--json", "webui"]

    def test_fewer_than_two(self) -> None:
        assert swap_positionals([]) is None
        assert swap_positionals(["ollama"]) is None
        assert swap_positionals(["--json", "ollama", "-v"]) is None

    def test_does_not_mutate_input(self) -> None:
        args = ["a", "b"]
        swap_positionals(args)
        assert args == ["a", "b"]
