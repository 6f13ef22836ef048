"""Fixtures for CLI tests.

Every CLI test runs in its own working directory with an isolated
config directory, so the default ``./modctl.toml`` and ``./mods`` paths
point into ``tmp_path``.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from modctl.core.http import HttpClient
from modctl.update import UpdateResult, UpdateState
from modctl.utils import formatting


@pytest.fixture(autouse=True)
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate working directory, config directory and build mode."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("MODCTL_BUILD_MODE", raising=False)
    monkeypatch.delenv("MODCTL_SELF_UPDATED", raising=False)
    # Wide consoles keep messages on one line
    monkeypatch.setattr(formatting.console, "width", 200)
    monkeypatch.setattr(formatting.err_console, "width", 200)
    return tmp_path


@pytest.fixture
def use_registry(monkeypatch: pytest.MonkeyPatch, registry_client: HttpClient) -> HttpClient:
    """Route the sync command's HTTP client to the fake registry."""
    monkeypatch.setattr(
        "modctl.cli.commands.sync.open_client",
        lambda settings: registry_client,
    )
    return registry_client


@pytest.fixture
def fake_updater(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace SelfUpdater; ``fake_updater.return_value.run`` controls the result."""
    updater_cls = MagicMock()
    updater_cls.return_value.run.return_value = UpdateResult(UpdateState.UP_TO_DATE, tag="v0.3.0")
    monkeypatch.setattr("modctl.cli.common.SelfUpdater", updater_cls)
    return updater_cls
