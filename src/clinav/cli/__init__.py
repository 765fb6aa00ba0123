"""Command-line interface for clinav.

Commands:
    - run: Pick and run a command of any click application
    - tree: Show an application's command catalog
    - themes: Preview the color themes
    - demo: Try the picker on a bundled demo application

Architecture:
    Uses Click for command-line parsing with a group-based structure.
    Commands are lazy-loaded so ``clinav --help`` stays fast.
"""

from .main import cli, main

__all__ = ["cli", "main"]
