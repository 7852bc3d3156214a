"""Tests for HarborSettings and harbor.toml discovery."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from harborctl.config.discovery import find_config, locate_config
from harborctl.config.settings import HarborSettings


class TestDiscovery:
    def test_walk_up(self, tmp_path: Path) -> None:
        (tmp_path / "harbor.toml").write_text("", encoding="utf-8")
        deep = tmp_path / "a" / "b"
        deep.mkdir(parents=True)
        assert find_config(deep) == tmp_path.resolve() / "harbor.toml"

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = tmp_path / "other.toml"
        other.write_text("", encoding="utf-8")
        (tmp_path / "harbor.toml").write_text("", encoding="utf-8")
        monkeypatch.setenv("HARBORCTL_CONFIG", str(other))
        assert find_config(tmp_path) == other

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARBORCTL_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path / "nowhere") is None

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("", encoding="utf-8")
        (tmp_path / "harbor.toml").write_text("", encoding="utf-8")
        assert locate_config(str(path), tmp_path) == path

    def test_missing_explicit_path_skips_discovery(self, tmp_path: Path) -> None:
        (tmp_path / "harbor.toml").write_text("", encoding="utf-8")
        assert locate_config(str(tmp_path / "nope.toml"), tmp_path) is None

    def test_discovers_from_home(self, tmp_path: Path) -> None:
        (tmp_path / "harbor.toml").write_text("", encoding="utf-8")
        assert locate_config(None, tmp_path) == tmp_path.resolve() / "harbor.toml"


class TestHarborSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = HarborSettings.from_cli(harbor_home=tmp_path)
        assert settings.harbor_home == tmp_path
        assert settings.config_path is None
        assert settings.env_path == tmp_path / ".env"
        assert settings.defaults_path == tmp_path / "default.env"
        assert settings.tunnel.poll_interval == 1.0
        assert settings.tunnel.log_tail == 200
        assert settings.compose.wildcard == "*"

    def test_home_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "harbor.toml").write_text("[store]\nenv_file = 'harbor.env'\n", encoding="utf-8")
        sub = tmp_path / "sub"
        sub.mkdir()
        monkeypatch.chdir(sub)
        settings = HarborSettings.from_cli()
        assert settings.harbor_home == tmp_path.resolve()
        assert settings.env_path == tmp_path.resolve() / "harbor.env"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("[tunnel]\ntimeout = 10\n", encoding="utf-8")
        settings = HarborSettings.from_cli(config_path=str(path), harbor_home=tmp_path)
        assert settings.config_path == path
        assert settings.tunnel.timeout == 10.0

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "harbor.toml").write_text("[tunnel]\ntimeout = 10\n", encoding="utf-8")
        monkeypatch.setenv("HARBORCTL_TUNNEL__TIMEOUT", "30")
        settings = HarborSettings.from_cli(harbor_home=tmp_path)
        assert settings.tunnel.timeout == 30.0

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = HarborSettings.from_cli(harbor_home=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True
        assert settings.quiet is False

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "harbor.toml").write_text("[tunnel\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            HarborSettings.from_cli(harbor_home=tmp_path)

    def test_frozen(self, tmp_path: Path) -> None:
        settings = HarborSettings.from_cli(harbor_home=tmp_path)
        with pytest.raises(Exception):  # noqa: B017
            settings.quiet = True  # type: ignore[misc]
