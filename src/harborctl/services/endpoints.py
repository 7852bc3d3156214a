"""EndpointService — derive service URLs from docker port mappings.

Three views of the same service:

- local:    ``http://localhost:<host port>``
- lan:      ``http://<host LAN IP>:<host port>``
- internal: ``http://<container name>:<container port>`` on the harbor network
"""

from __future__ import annotations

import re
from enum import StrEnum

from harborctl.errors import EndpointUnavailable, HarborError
from harborctl.infrastructure.hardware import lan_ip
from harborctl.services.base import BaseService
from harborctl.services.result import ErrorCode, ServiceResult

_CONTAINER_PORT = re.compile(r"^(\d+)/\w+", re.MULTILINE)
_HOST_PORT = re.compile(r"0\.0\.0\.0:(\d+)")

DEFAULT_OPEN_KEY = "ui.main"


class UrlMode(StrEnum):
    LOCAL = "local"
    LAN = "lan"
    INTERNAL = "internal"


class EndpointService(BaseService):
    """Resolves URLs for running compose services."""

    def _ensure_running(self, handle: str) -> None:
        running = self._engine.running_services()
        if not running:
            raise EndpointUnavailable("No services are currently running.", service=handle)
        if handle not in running:
            msg = f"Service '{handle}' is not currently running."
            raise EndpointUnavailable(msg, service=handle, running=running)

    def internal_url(self, handle: str) -> str:
        """URL reachable from other containers on the harbor network.

        Raises:
            EndpointUnavailable: No container or no exposed port.
        """
        container = self.container_name(handle)
        ports = sorted({int(p) for p in _CONTAINER_PORT.findall(self._engine.port(container))})
        if not ports:
            msg = f"Failed to get internal port for service '{handle}'"
            raise EndpointUnavailable(msg, service=handle, container=container)
        return f"http://{container}:{ports[0]}"

    def host_port(self, handle: str) -> int:
        """First host port published on 0.0.0.0 for *handle*."""
        self._ensure_running(handle)
        container = self.container_name(handle)
        match = _HOST_PORT.search(self._engine.port(container))
        if match is None:
            msg = f"No port mapping found for service '{handle}'"
            raise EndpointUnavailable(msg, service=handle, container=container)
        return int(match.group(1))

    def local_url(self, handle: str) -> str:
        return f"http://localhost:{self.host_port(handle)}"

    def lan_url(self, handle: str) -> str:
        port = self.host_port(handle)
        address = lan_ip()
        if address is None:
            raise EndpointUnavailable("Failed to get IP address", service=handle)
        return f"http://{address}:{port}"

    def url(self, handle: str | None = None, mode: UrlMode = UrlMode.LOCAL) -> ServiceResult:
        """URL for *handle* (default: the configured main UI service)."""
        target = handle or self._store.get(DEFAULT_OPEN_KEY)
        if not target:
            return ServiceResult.failure(
                "url", ErrorCode.INVALID_ARGUMENT, "No service handle given and ui.main is unset"
            )
        resolvers = {
            UrlMode.LOCAL: self.local_url,
            UrlMode.LAN: self.lan_url,
            UrlMode.INTERNAL: self.internal_url,
        }
        try:
            url = resolvers[mode](target)
        except HarborError as exc:
            return ServiceResult.from_exception("url", exc)
        return ServiceResult(ok=True, op="url", data={"service": target, "mode": str(mode), "url": url})
