"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, harbor.toml only contains
overrides. A fresh install needs no harbor.toml at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- harbor.toml sections ---


class ComposeConfig(BaseModel):
    """[compose] section — layer naming and the delegate engine."""

    model_config = {"frozen": True}

    engine: list[str] = Field(default_factory=lambda: ["docker", "compose"])
    base_file: str = "compose.yml"
    prefix: str = "compose"
    cross_marker: str = "x"
    suffix: str = ".yml"
    wildcard: str = "*"
    gpu_tag: str = "nvidia"
    qr_service: str = "qrgen"


class StoreConfig(BaseModel):
    """[store] section — the persisted HARBOR_* env file."""

    model_config = {"frozen": True}

    env_file: str = ".env"
    defaults_file: str = "default.env"
    prefix: str = "HARBOR_"
    delimiter: str = ";"


class TunnelConfig(BaseModel):
    """[tunnel] section."""

    model_config = {"frozen": True}

    service: str = "cfd"
    name_prefix: str = "cfd.tunnel"
    timeout: float = 60.0
    poll_interval: float = 1.0
    log_tail: int = 200
