"""Rich Console factory and theme for harbor output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HARBOR_THEME = Theme(
    {
        "harbor.ok": "bold green",
        "harbor.error": "bold red",
        "harbor.warning": "bold yellow",
        "harbor.op": "bold cyan",
        "harbor.key": "dim",
        "harbor.url": "bold blue underline",
        "harbor.service": "bold",
        "harbor.path": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=HARBOR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def write_raw(console: Console, text: str) -> None:
    """Write *text* verbatim: no markup, highlighting, or wrapping.

    Used for values meant to be consumed by a shell (commands, URLs).
    """
    console.out(text, highlight=False)
