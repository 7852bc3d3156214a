"""BaseService — shared foundation for harborctl services.

Every service receives the persisted store and the frozen settings
explicitly at construction time; no service reads ambient process state
for configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from harborctl.infrastructure.engine import DockerEngine

if TYPE_CHECKING:
    from harborctl.config.settings import HarborSettings
    from harborctl.infrastructure.store import EnvStore


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class TunnelService(BaseService):
            def expose(self, handle: str) -> ServiceResult:
                url = self._store.get("container.prefix")
                ...
    """

    def __init__(
        self,
        store: EnvStore,
        settings: HarborSettings,
        *,
        engine: DockerEngine | None = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._engine = engine or DockerEngine(
            settings.harbor_home, compose=settings.compose.engine
        )

    @property
    def container_prefix(self) -> str:
        return self._store.get("container.prefix")

    def container_name(self, handle: str) -> str:
        """Docker container name for a compose service handle."""
        prefix = self.container_prefix
        return f"{prefix}.{handle}" if prefix else handle
