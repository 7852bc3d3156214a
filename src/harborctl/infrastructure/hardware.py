"""Read-only host capability probes."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess

from harborctl.infrastructure.engine import DockerEngine

logger = logging.getLogger(__name__)

_NVIDIA_RUNTIME = re.compile(r"Runtimes:.*\bnvidia\b")


def has_nvidia_driver() -> bool:
    """Whether the ``nvidia-smi`` binary is on PATH."""
    return shutil.which("nvidia-smi") is not None


def has_nvidia_runtime(engine: DockerEngine) -> bool:
    """Whether docker lists an ``nvidia`` runtime in ``docker info``."""
    return _NVIDIA_RUNTIME.search(engine.info()) is not None


def detect_gpu(engine: DockerEngine) -> bool:
    """Both an NVIDIA driver and the NVIDIA container runtime are present.

    Not cached: every call probes the host again.
    """
    detected = has_nvidia_driver() and has_nvidia_runtime(engine)
    logger.debug("GPU capability detected: %s", detected)
    return detected


def lan_ip() -> str | None:
    """Best-effort LAN address of this host."""
    if shutil.which("ip"):
        proc = subprocess.run(
            ["ip", "route", "get", "1"], capture_output=True, text=True, check=False
        )
        match = re.search(r"\bsrc\s+(\d+\.\d+\.\d+\.\d+)", proc.stdout)
        if match:
            return match.group(1)
    if shutil.which("hostname"):
        proc = subprocess.run(["hostname", "-I"], capture_output=True, text=True, check=False)
        parts = proc.stdout.split()
        if parts:
            return parts[0]
    return None
