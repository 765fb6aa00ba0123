"""Draw engine frames with rich.

A :class:`~clinav.engine.frames.Frame` only names semantic styles; the
console's theme (see :func:`clinav.cli.styles.build_rich_theme`) supplies
the colors.
"""

from io import StringIO

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from clinav.cli.styles import ColorTheme, make_console
from clinav.engine.frames import Frame, FrameStyle, Line


def line_text(line: Line) -> Text:
    text = Text(no_wrap=True, overflow="ellipsis")
    for segment in line:
        text.append(segment.text, style=segment.style or None)
    return text


def frame_renderable(frame: Frame, theme: ColorTheme) -> RenderableType:
    """A rich panel for ``frame``; borderless for themes without borders."""
    body = Group(*(line_text(line) for line in frame.lines))
    panel = Panel(
        body,
        title=Text(frame.title, style=FrameStyle.TITLE),
        title_align="left",
        border_style="border",
        box=box.ROUNDED if theme.bordered else box.SIMPLE,
        padding=(0, 1),
        width=frame.viewport.width,
    )
    if not frame.footer:
        return panel
    return Group(panel, Text(frame.footer, style=FrameStyle.FOOTER, no_wrap=True, overflow="ellipsis"))


def frame_to_ansi(frame: Frame, theme: ColorTheme) -> str:
    """Render ``frame`` to a string of ANSI escape sequences at the frame's viewport width."""
    buffer = StringIO()
    console = make_console(
        theme,
        file=buffer,
        force_terminal=True,
        color_system="truecolor",
        width=frame.viewport.width,
    )
    console.print(frame_renderable(frame, theme), end="")
    return buffer.getvalue()
