from __future__ import annotations

from pathlib import Path

import pytest

from pkl_installer.core.config import ConfigManager


@pytest.fixture
def config_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return ConfigManager(config_dir=tmp_path / "config")
