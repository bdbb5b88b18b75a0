#!/usr/bin/env python3
"""
pkl-vscode Installer Launcher Script

Simple script to launch the installer from the root directory.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from pkl_installer.main import main

if __name__ == "__main__":
    sys.exit(main())
