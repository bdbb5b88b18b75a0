from __future__ import annotations

from pathlib import Path

import pytest

from pkl_installer.core.config import ConfigManager


def test_defaults_are_written(config_manager: ConfigManager) -> None:
    assert config_manager.config_file.exists()
    assert config_manager.get_repo_owner() == "apple"
    assert config_manager.get_repo_name() == "pkl-vscode"
    assert config_manager.get_extension_id() == "apple.pkl-vscode"
    assert config_manager.get_editor_command() == "code"
    assert config_manager.get_toolchain_command() == "mise use java"
    assert config_manager.is_toolchain_enabled() is True
    assert config_manager.get_keep_download() is False
    assert config_manager.get_last_installed_version() == ""


def test_asset_name_template(config_manager: ConfigManager) -> None:
    assert config_manager.get_asset_name("0.31.0") == "pkl-vscode-0.31.0.vsix"


def test_download_dir_defaults_to_cwd(config_manager: ConfigManager, tmp_path: Path,
                                      monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert config_manager.get_download_dir() == tmp_path

    config_manager.set_download_dir(str(tmp_path / "dl"))
    assert config_manager.get_download_dir() == tmp_path / "dl"


def test_values_persist_across_instances(tmp_path: Path) -> None:
    first = ConfigManager(config_dir=tmp_path)
    first.set_last_installed_version("0.31.0")
    first.set_editor_command("codium")

    second = ConfigManager(config_dir=tmp_path)
    assert second.get_last_installed_version() == "0.31.0"
    assert second.get_editor_command() == "codium"


def test_missing_options_are_backfilled(tmp_path: Path) -> None:
    config_file = tmp_path / "pkl_vscode_installer_config.ini"
    config_file.write_text("[editor]\ncommand = code-insiders\n", encoding="utf-8")

    manager = ConfigManager(config_dir=tmp_path)

    assert manager.get_editor_command() == "code-insiders"
    assert manager.get_repo_name() == "pkl-vscode"
    assert "[toolchain]" in config_file.read_text(encoding="utf-8")


def test_corrupted_config_is_backed_up(tmp_path: Path) -> None:
    config_file = tmp_path / "pkl_vscode_installer_config.ini"
    config_file.write_text("this is not an ini file\n", encoding="utf-8")

    manager = ConfigManager(config_dir=tmp_path)

    assert (tmp_path / "pkl_vscode_installer_config.ini.backup").exists()
    assert manager.get_repo_owner() == "apple"


def test_invalid_boolean_falls_back_to_default(tmp_path: Path) -> None:
    config_file = tmp_path / "pkl_vscode_installer_config.ini"
    config_file.write_text("[toolchain]\nenabled = maybe\n", encoding="utf-8")

    manager = ConfigManager(config_dir=tmp_path)

    assert manager.is_toolchain_enabled() is True


def test_env_token_overrides_stored_token(config_manager: ConfigManager,
                                          monkeypatch: pytest.MonkeyPatch) -> None:
    assert config_manager.get_github_token() is None

    config_manager.set_github_token("ghp_stored")
    assert config_manager.get_github_token() == "ghp_stored"

    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    assert config_manager.get_github_token() == "ghp_env"
