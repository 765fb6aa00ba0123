"""prompt_toolkit driver for the engine's state machines.

One :class:`~prompt_toolkit.application.Application` runs per prompt. Every
key press is translated to a :class:`~clinav.engine.events.KeyEvent` and
dispatched to the loop; the application exits once the machine finishes.
Terminal size is checked before each redraw and reported to the machine as
a :class:`~clinav.engine.events.ResizeEvent` when it changes.
"""

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys as PromptKeys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from clinav.cli.styles import ColorTheme
from clinav.engine.events import KeyEvent, Keys, ResizeEvent, Viewport
from clinav.engine.loop import EventLoop
from clinav.errors import RenderError
from clinav.interfaces.tui.frames import frame_to_ansi
from clinav.utils.log_filter import quiet_logger
from clinav.utils.logger import get_logger

logger = get_logger("tui")

# prompt_toolkit spells several keys as their control characters
_KEY_ALIASES = {
    "c-m": Keys.ENTER,
    "c-j": Keys.ENTER,
    "c-h": Keys.BACKSPACE,
    "c-i": Keys.TAB,
    "<sigint>": Keys.CTRL_C,
}


def translate_key(key) -> str | None:
    """Engine key name for a prompt_toolkit key, or ``None`` for keys to ignore."""
    name = key.value if isinstance(key, PromptKeys) else str(key)
    name = _KEY_ALIASES.get(name, name)
    if name.startswith("<"):
        # Mouse events, cursor position responses and the like
        return None
    return name


class PromptToolkitDriver:
    """Drives an :class:`~clinav.engine.loop.EventLoop` on a real terminal.

    :param theme: Colors for drawing frames
    :param full_screen: Use the alternate screen
    :param input: prompt_toolkit input (the terminal when ``None``)
    :param output: prompt_toolkit output (the terminal when ``None``)
    """

    def __init__(self, theme: ColorTheme, full_screen: bool = False, input=None, output=None):
        self.theme = theme
        self.full_screen = full_screen
        self.input = input
        self.output = output
        self.closed = False

    def _bindings(self, loop: EventLoop, app_ref: list) -> KeyBindings:
        bindings = KeyBindings()

        def dispatch(name: str) -> None:
            if loop.done:
                return
            if loop.dispatch(KeyEvent(name)):
                app_ref[0].exit()

        # Escape must not wait for the rest of an escape sequence
        @bindings.add(PromptKeys.Escape, eager=True)
        def _(event):
            dispatch(Keys.ESCAPE)

        @bindings.add(PromptKeys.BracketedPaste)
        def _(event):
            for char in event.data:
                if char.isprintable():
                    dispatch(char)

        @bindings.add(PromptKeys.Any)
        def _(event):
            for key_press in event.key_sequence:
                name = translate_key(key_press.key)
                if name is not None:
                    dispatch(name)

        return bindings

    def _check_size(self, loop: EventLoop, app: Application) -> None:
        size = app.output.get_size()
        viewport = Viewport(width=size.columns, height=size.rows)
        if viewport != loop.state.viewport and not loop.done:
            loop.dispatch(ResizeEvent(width=size.columns, height=size.rows))

    def drive(self, loop: EventLoop) -> None:
        if self.closed:
            raise RenderError("Terminal driver used after cleanup")
        if loop.start():
            return

        app_ref: list[Application] = []
        control = FormattedTextControl(
            lambda: ANSI(frame_to_ansi(loop.frame(), self.theme)),
            focusable=True,
            show_cursor=False,
        )
        app = Application(
            layout=Layout(Window(control, dont_extend_height=True, wrap_lines=False)),
            key_bindings=self._bindings(loop, app_ref),
            full_screen=self.full_screen,
            erase_when_done=True,
            before_render=lambda application: self._check_size(loop, application),
            input=self.input,
            output=self.output,
        )
        app_ref.append(app)

        try:
            # Log lines would tear through the prompt
            with quiet_logger("clinav"):
                app.run()
        except (OSError, EOFError) as e:
            raise RenderError(f"Terminal input failed: {e}") from e

        if not loop.done:
            raise RenderError("Terminal prompt ended before it was answered")

    def close(self) -> None:
        self.closed = True
        logger.debug("Terminal driver closed")
