"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from harborctl.output.console import create_console, get_output, write_raw

if TYPE_CHECKING:
    from rich.console import Console

    from harborctl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console", bool], None]

# Values printed alone in --quiet mode, by op.
_PRIMARY_KEYS: dict[str, str] = {
    "cmd": "command",
    "tunnel": "public_url",
    "url": "url",
    "config_get": "value",
}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose)
    else:
        _render_error(result, console, verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: the primary value, list items, or the error line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    key = _PRIMARY_KEYS.get(result.op)
    if key is not None and key in result.data:
        return str(result.data[key])
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item) for item in items)
    return ""


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="harbor.ok"), Text(f"  {result.op}", style="harbor.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="harbor.key")
    if key.endswith("url"):
        v = Text(str(value), style="harbor.url")
    elif key in ("path", "layers"):
        v = Text(str(value), style="harbor.path")
    else:
        v = Text(str(value))
    console.print(k, v, soft_wrap=True)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}", markup=False)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, verbose: bool) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="harbor.error"),
        Text(f"  {result.op}", style="harbor.op"),
        Text(" - "),
        Text(msg),
        soft_wrap=True,
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_primary(result: ServiceResult, console: Console, verbose: bool) -> None:
    """Print only the primary value, suitable for ``$(harbor ...)``."""
    write_raw(console, str(result.data.get(_PRIMARY_KEYS[result.op], "")))
    if verbose:
        _render_meta(console, result)


def _render_tunnel(result: ServiceResult, console: Console, verbose: bool) -> None:
    d = result.data
    body = Text.assemble(
        ("Tunnel URL: ", "harbor.key"),
        (str(d.get("public_url", "")), "harbor.url"),
        "\n",
        ("Intra URL:  ", "harbor.key"),
        str(d.get("internal_url", "")),
        "\n",
        ("Container:  ", "harbor.key"),
        str(d.get("name", "")),
    )
    console.print(Panel(body, title=str(d.get("service", "tunnel")), expand=False))
    if verbose:
        _render_meta(console, result)


def _render_items(result: ServiceResult, console: Console, verbose: bool) -> None:
    items = result.data.get("items", [])
    if not items:
        key = result.data.get("key")
        console.print(f"Config {key} is empty" if key else "Nothing to show", markup=False)
        return
    for item in items:
        write_raw(console, str(item))


def _render_config_ls(result: ServiceResult, console: Console, verbose: bool) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False, box=None)
    table.add_column("Key", style="harbor.key", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for key, value in result.data.items():
        table.add_row(key, str(value))
    console.print(table)


def _render_tunnel_down(result: ServiceResult, console: Console, verbose: bool) -> None:
    stopped = result.data.get("stopped", [])
    if not stopped:
        console.print("No tunnels running")
        return
    console.print(f"Stopped {len(stopped)} tunnel(s)")
    for name in stopped:
        console.print(f"  {name}", markup=False)


def _render_generic(result: ServiceResult, console: Console, verbose: bool) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "cmd": _render_primary,
    "url": _render_primary,
    "config_get": _render_primary,
    "tunnel": _render_tunnel,
    "tunnel_down": _render_tunnel_down,
    "ls": _render_items,
    "list": _render_items,
    "config_ls": _render_config_ls,
}
