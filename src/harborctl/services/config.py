"""ConfigService — read and edit the persisted HARBOR_* store."""

from __future__ import annotations

from harborctl.errors import ConfigurationError
from harborctl.services.base import BaseService
from harborctl.services.result import ErrorCode, ServiceResult


class ConfigService(BaseService):
    """Scalar and list operations on the env store."""

    def get(self, key: str) -> ServiceResult:
        try:
            value = self._store.get(key)
        except ConfigurationError as exc:
            return ServiceResult.from_exception("config_get", exc)
        return ServiceResult(ok=True, op="config_get", data={"key": key, "value": value})

    def set(self, key: str, value: str) -> ServiceResult:
        try:
            self._store.set(key, value)
        except ConfigurationError as exc:
            return ServiceResult.from_exception("config_set", exc)
        return ServiceResult(ok=True, op="config_set", data={"key": key, "value": value})

    def items(self) -> ServiceResult:
        try:
            entries = dict(self._store.items())
        except ConfigurationError as exc:
            return ServiceResult.from_exception("config_ls", exc)
        return ServiceResult(ok=True, op="config_ls", data=entries)

    def reset(self) -> ServiceResult:
        if not self._settings.defaults_path.is_file():
            return ServiceResult.failure(
                "config_reset",
                ErrorCode.NOT_FOUND,
                f"Defaults file not found: {self._settings.defaults_path}",
            )
        try:
            self._store.reset()
        except ConfigurationError as exc:
            return ServiceResult.from_exception("config_reset", exc)
        return ServiceResult(
            ok=True, op="config_reset", data={"path": str(self._settings.env_path)}
        )

    # ------------------------------------------------------------------
    # Lists (services.default, services.tunnels)
    # ------------------------------------------------------------------

    def list_values(self, key: str) -> ServiceResult:
        try:
            values = self._store.list(key)
        except ConfigurationError as exc:
            return ServiceResult.from_exception("list", exc)
        return ServiceResult(
            ok=True, op="list", data={"key": key, "count": len(values), "items": values}
        )

    def add(self, key: str, value: str) -> ServiceResult:
        if not value:
            return ServiceResult.failure("list_add", ErrorCode.INVALID_ARGUMENT, "Nothing to add")
        try:
            values = self._store.add(key, value)
        except ConfigurationError as exc:
            return ServiceResult.from_exception("list_add", exc)
        return ServiceResult(ok=True, op="list_add", data={"key": key, "items": values})

    def remove(self, key: str, value: str | None = None) -> ServiceResult:
        """Remove by value or zero-based index; no value clears the list."""
        try:
            values = self._store.remove(key, value)
        except ConfigurationError as exc:
            return ServiceResult.from_exception("list_rm", exc)
        return ServiceResult(ok=True, op="list_rm", data={"key": key, "items": values})
