"""Terminal interface.

Draws engine frames with rich and reads keys with prompt_toolkit.
"""

from clinav.interfaces.tui.driver import PromptToolkitDriver
from clinav.interfaces.tui.renderer import TerminalRenderer

__all__ = ["PromptToolkitDriver", "TerminalRenderer"]
