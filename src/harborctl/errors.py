"""Typed exceptions raised below the service layer.

Infrastructure and domain code raise these; services catch them and
convert them into :class:`~harborctl.services.result.ServiceError`
payloads. Each exception carries a stable ``code`` matching the
ServiceError code the service reports.
"""

from __future__ import annotations

from typing import Any


class HarborError(Exception):
    """Base class for all harborctl failures."""

    code = "HARBOR_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationError(HarborError):
    """The store or a layer directory cannot be read."""

    code = "CONFIGURATION"


class EndpointUnavailable(HarborError):
    """A service endpoint (container, port) cannot be derived."""

    code = "UNAVAILABLE"


class ContainerNotFound(EndpointUnavailable):
    """Docker reports that the named container does not exist."""


class SpawnError(HarborError):
    """A subprocess failed to start."""

    code = "SPAWN_FAILED"


class TunnelTimeout(HarborError):
    """No tunnel URL appeared within the polling bound."""

    code = "TIMEOUT"
