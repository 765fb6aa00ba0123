"""questionary-based renderer."""

from clinav.interfaces.prompt.renderer import PromptRenderer

__all__ = ["PromptRenderer"]
