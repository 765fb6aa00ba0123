"""Full-terminal renderer built on prompt_toolkit and rich."""

from clinav.cli.styles import ColorTheme, get_theme
from clinav.engine.renderer import MachineRenderer
from clinav.interfaces.tui.driver import PromptToolkitDriver
from clinav.utils.config import TUIConfig


class TerminalRenderer(MachineRenderer):
    """Runs the menu, form and confirmation machines on the terminal.

    :param config: Session options; ``theme`` and ``full_screen`` are used here
    :param theme: Overrides ``config.theme``
    :param input: prompt_toolkit input, for tests and embedding
    :param output: prompt_toolkit output, for tests and embedding
    :raises ConfigurationError: If ``config.theme`` names an unknown theme
    """

    def __init__(self, config: TUIConfig | None = None, theme: ColorTheme | None = None, input=None, output=None):
        config = config or TUIConfig()
        self.theme = theme or get_theme(config.theme)
        driver = PromptToolkitDriver(self.theme, full_screen=config.full_screen, input=input, output=output)
        super().__init__(driver, config)
