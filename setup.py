"""
pkl-vscode Installer
A Python 3 command line tool that downloads and installs the pkl-vscode editor extension
"""

from setuptools import setup, find_packages

setup(
    name="pkl-vscode-installer",
    version="1.0.0",
    description="Download and install the latest pkl-vscode extension into VS Code",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests>=2.31.0",
        "configparser>=5.3.0",
    ],
    extras_require={
        "build": [
            "pyinstaller>=6.0.0",
        ],
        "docs": [
            "pdoc>=14.0.0",
        ],
        "lint": [
            "flake8>=7.0.0",
        ],
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pkl-vscode-install=pkl_installer.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: Software Development",
        "Topic :: System :: Installation/Setup",
    ],
)
