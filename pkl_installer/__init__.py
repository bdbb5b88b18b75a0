"""
pkl-vscode Installer

Installs the latest pkl-vscode release into a VS Code compatible editor.
"""

__version__ = "1.0.0"
