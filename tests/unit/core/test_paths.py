"""Unit tests for path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from modctl.core.paths import (
    ensure_mods_dir,
    get_backup_path,
    get_config_dir,
    get_manifest_path,
    get_settings_path,
    get_staging_path,
)


class TestConfigPaths:
    """Tests for XDG-based settings paths."""

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """XDG_CONFIG_HOME overrides ~/.config."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / "modctl"
            assert get_settings_path() == tmp_path / "modctl" / "config.toml"

    def test_defaults_to_home(self, tmp_path: Path) -> None:
        """Without XDG_CONFIG_HOME, ~/.config is used."""
        env = {k: v for k, v in os.environ.items() if k != "XDG_CONFIG_HOME"}
        with (
            patch.dict(os.environ, env, clear=True),
            patch.object(Path, "home", return_value=tmp_path),
        ):
            assert get_config_dir() == tmp_path / ".config" / "modctl"


class TestProjectPaths:
    """Tests for manifest and mods directory paths."""

    def test_relative_to_base(self, tmp_path: Path) -> None:
        assert get_manifest_path(tmp_path) == tmp_path / "modctl.toml"

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert get_manifest_path() == tmp_path / "modctl.toml"

    def test_ensure_mods_dir_creates(self, tmp_path: Path) -> None:
        """Missing directories are created with parents."""
        path = tmp_path / "instance" / "mods"

        assert ensure_mods_dir(path) == path
        assert path.is_dir()

    def test_ensure_mods_dir_failure(self, tmp_path: Path) -> None:
        """A file in the way raises RuntimeError."""
        blocker = tmp_path / "mods"
        blocker.write_text("")

        with pytest.raises(RuntimeError, match="Cannot create mods directory"):
            ensure_mods_dir(blocker / "sub")


class TestExecutablePaths:
    """Tests for self-update sibling paths."""

    def test_siblings(self) -> None:
        """Backup and staging files sit next to the executable."""
        exe = Path("/opt/modctl/modctl.exe")

        assert get_backup_path(exe) == Path("/opt/modctl/modctl.exe.old")
        assert get_staging_path(exe) == Path("/opt/modctl/modctl.exe.new")
