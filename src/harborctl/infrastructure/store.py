"""Persisted HARBOR_* configuration store backed by an env file.

Values live in ``.env`` as ``HARBOR_KEY="value"`` lines. Keys are
accepted in dotted lowercase (``services.default``) and normalized to
the env form (``SERVICES_DEFAULT``). List values are delimiter-joined
strings whose order is preserved.

A missing ``.env`` is seeded from ``default.env`` by :meth:`EnvStore.ensure`.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from harborctl.errors import ConfigurationError

logger = logging.getLogger(__name__)


def normalize_key(key: str) -> str:
    """``services.default`` -> ``SERVICES_DEFAULT``."""
    return key.strip().upper().replace(".", "_").replace("-", "_")


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


class EnvStore:
    """Key/value and key/list access to a prefixed env file."""

    def __init__(
        self,
        path: Path,
        *,
        defaults_path: Path | None = None,
        prefix: str = "HARBOR_",
        delimiter: str = ";",
    ) -> None:
        self.path = path
        self.defaults_path = defaults_path
        self.prefix = prefix
        self.delimiter = delimiter

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            return self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            msg = f"Cannot read config store {self.path}: {exc}"
            raise ConfigurationError(msg, path=str(self.path)) from exc

    def _write_lines(self, lines: list[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot write config store {self.path}: {exc}"
            raise ConfigurationError(msg, path=str(self.path)) from exc

    def _line_pattern(self, env_key: str) -> re.Pattern[str]:
        return re.compile(rf"^{re.escape(self.prefix + env_key)}=(.*)$")

    def ensure(self) -> bool:
        """Seed the store from the defaults file if it doesn't exist yet.

        Returns True when a new file was created.
        """
        if self.path.exists() or self.defaults_path is None:
            return False
        if not self.defaults_path.is_file():
            return False
        logger.info("Creating %s from %s", self.path.name, self.defaults_path.name)
        try:
            shutil.copyfile(self.defaults_path, self.path)
        except OSError as exc:
            msg = f"Cannot create config store {self.path}: {exc}"
            raise ConfigurationError(msg, path=str(self.path)) from exc
        return True

    def reset(self) -> None:
        """Drop the current store and re-seed it from the defaults file."""
        self.path.unlink(missing_ok=True)
        self.ensure()

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def get(self, key: str) -> str:
        """Value for *key*, or an empty string when unset."""
        pattern = self._line_pattern(normalize_key(key))
        for line in self._read_lines():
            match = pattern.match(line)
            if match:
                return _unquote(match.group(1))
        return ""

    def set(self, key: str, value: str) -> None:
        """Set *key*, replacing an existing line in place or appending."""
        env_key = normalize_key(key)
        pattern = self._line_pattern(env_key)
        rendered = f'{self.prefix}{env_key}="{value}"'
        lines = self._read_lines()
        for i, line in enumerate(lines):
            if pattern.match(line):
                lines[i] = rendered
                break
        else:
            lines.append(rendered)
        self._write_lines(lines)
        logger.debug("Set %s%s", self.prefix, env_key)

    def items(self) -> list[tuple[str, str]]:
        """All prefixed entries as ``(KEY, value)`` with the prefix stripped."""
        result: list[tuple[str, str]] = []
        for line in self._read_lines():
            if not line.startswith(self.prefix) or "=" not in line:
                continue
            key, _, raw = line[len(self.prefix) :].partition("=")
            result.append((key, _unquote(raw)))
        return result

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def list(self, key: str) -> list[str]:
        """Ordered list stored under *key*; blanks are dropped."""
        raw = self.get(key)
        return [item.strip() for item in raw.split(self.delimiter) if item.strip()]

    def set_list(self, key: str, values: list[str]) -> None:
        self.set(key, self.delimiter.join(values))

    def add(self, key: str, value: str) -> list[str]:
        """Append *value* to the list under *key*."""
        values = self.list(key)
        values.append(value)
        self.set_list(key, values)
        return values

    def remove(self, key: str, value: str | None = None) -> list[str]:
        """Remove an entry by value or by zero-based index.

        With no *value*, the whole list is cleared. A numeric *value* is
        treated as an index.
        """
        if value is None or value == "":
            self.set_list(key, [])
            return []
        values = self.list(key)
        if value.isdigit():
            index = int(value)
            values = [v for i, v in enumerate(values) if i != index]
        else:
            values = [v for v in values if v != value]
        self.set_list(key, values)
        return values
