"""Tunnel session model and URL extraction.

A session moves ``starting -> polling -> ready | failed``. Only a ready
session keeps its container running; every other exit path stops it.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from enum import StrEnum

# cloudflared prints the quick-tunnel URL inside an ASCII box:
#   |  https://some-words-here.trycloudflare.com  |
_BOXED_URL = re.compile(r"\|\s{2}(https://[^\s|]+\.trycloudflare\.com)\s+\|")
_BARE_URL = re.compile(r"https://[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.trycloudflare\.com")


class TunnelState(StrEnum):
    """Lifecycle of one exposure attempt."""

    STARTING = "starting"
    POLLING = "polling"
    READY = "ready"
    FAILED = "failed"


_TRANSITIONS: dict[TunnelState, frozenset[TunnelState]] = {
    TunnelState.STARTING: frozenset({TunnelState.POLLING, TunnelState.FAILED}),
    TunnelState.POLLING: frozenset({TunnelState.READY, TunnelState.FAILED}),
    TunnelState.READY: frozenset(),
    TunnelState.FAILED: frozenset(),
}


@dataclass
class TunnelSession:
    """One exposure attempt for a single service."""

    target_service: str
    name: str = ""
    internal_url: str = ""
    process_handle: str | None = None
    public_url: str | None = None
    state: TunnelState = TunnelState.STARTING
    elapsed: float = 0.0
    error: str | None = None

    def advance(self, state: TunnelState) -> None:
        """Move to *state*, rejecting transitions out of a terminal state."""
        if state not in _TRANSITIONS[self.state]:
            msg = f"Invalid tunnel transition {self.state} -> {state}"
            raise ValueError(msg)
        self.state = state

    def fail(self, error: str) -> None:
        self.error = error
        self.advance(TunnelState.FAILED)

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]


def session_name(
    name_prefix: str,
    container_prefix: str,
    handle: str,
    *,
    now: float | None = None,
) -> str:
    """Unique container name for a new tunnel session.

    All sessions share ``<container_prefix>.<name_prefix>`` so they can be
    found again by a later, unrelated invocation.
    """
    stamp = int(time.time() if now is None else now)
    base = session_filter(name_prefix, container_prefix)
    return f"{base}.{handle}.{stamp}"


def session_filter(name_prefix: str, container_prefix: str) -> str:
    """Name fragment shared by every tunnel container."""
    if container_prefix:
        return f"{container_prefix}.{name_prefix}"
    return name_prefix


def extract_tunnel_url(text: str) -> str | None:
    """Return the first quick-tunnel URL found in cloudflared output."""
    match = _BOXED_URL.search(text)
    if match:
        return match.group(1)
    match = _BARE_URL.search(text)
    if match:
        return match.group(0)
    return None
