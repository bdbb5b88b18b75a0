from __future__ import annotations

from pathlib import Path

from pkl_installer.core.editor import EditorCLI, parse_extension_list
from pkl_installer.core.toolchain import ToolchainActivator
from pkl_installer.utils.commands import CommandResult

from helpers import FakeRunner


def test_install_extension_builds_command() -> None:
    runner = FakeRunner()
    editor = EditorCLI("code", runner=runner)

    result = editor.install_extension(Path("pkl-vscode-0.31.0.vsix"))

    assert result.success
    assert runner.calls == [["code", "--install-extension", "pkl-vscode-0.31.0.vsix"]]


def test_install_extension_force_and_custom_editor() -> None:
    runner = FakeRunner()
    editor = EditorCLI("codium --verbose", runner=runner)

    editor.install_extension(Path("x.vsix"), force=True)

    assert runner.calls == [["codium", "--verbose", "--install-extension", "x.vsix", "--force"]]


def test_parse_extension_list() -> None:
    output = "Apple.pkl-vscode@0.31.0\nms-python.python@2025.1.0\n\nnot-an-entry\n"

    assert parse_extension_list(output) == {
        "apple.pkl-vscode": "0.31.0",
        "ms-python.python": "2025.1.0",
    }


def test_installed_version_lookup() -> None:
    listing = CommandResult(args=[], returncode=0, stdout="apple.pkl-vscode@0.30.0\n")
    editor = EditorCLI("code", runner=FakeRunner({"--list-extensions": listing}))

    assert editor.installed_version("Apple.pkl-vscode") == "0.30.0"
    assert editor.installed_version("other.ext") is None


def test_installed_version_when_editor_fails() -> None:
    failed = CommandResult(args=[], returncode=127, stderr="Command not found: code")
    editor = EditorCLI("code", runner=FakeRunner({"--list-extensions": failed}))

    assert editor.installed_version("apple.pkl-vscode") is None


def test_toolchain_runs_configured_command() -> None:
    runner = FakeRunner()

    result = ToolchainActivator("mise use java", runner=runner).activate()

    assert result.success
    assert runner.calls == [["mise", "use", "java"]]


def test_toolchain_disabled_is_noop() -> None:
    runner = FakeRunner()

    result = ToolchainActivator("mise use java", enabled=False, runner=runner).activate()

    assert result.success
    assert runner.calls == []
