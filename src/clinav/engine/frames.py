"""Frames - the toolkit-neutral output of a state machine's ``render``.

A frame is a title, a list of lines made of styled segments, and a footer
of key hints. Style names are semantic (:class:`FrameStyle`); the terminal
renderer maps them to theme colors, so machines never know about colors.
"""

from dataclasses import dataclass

from clinav.engine.events import Viewport


class FrameStyle:
    """Semantic style names used in frame segments."""

    TITLE = "title"
    ENTRY = "entry"
    CURSOR = "cursor"
    DISABLED = "disabled"
    DESCRIPTION = "description"
    HIGHLIGHT = "highlight"
    QUERY = "query"
    LABEL = "label"
    VALUE = "value"
    EDIT = "edit"
    SCOPE = "scope"
    ERROR = "error"
    FOOTER = "footer"
    BUTTON = "button"
    BUTTON_ACTIVE = "button.active"


@dataclass(frozen=True)
class Segment:
    text: str
    style: str = ""


Line = tuple[Segment, ...]


@dataclass(frozen=True)
class Frame:
    title: str
    lines: tuple[Line, ...] = ()
    footer: str = ""
    viewport: Viewport = Viewport()

    def plain_lines(self) -> list[str]:
        """Lines without styling, for logs and tests."""
        return ["".join(segment.text for segment in line) for line in self.lines]

    def plain_text(self) -> str:
        parts = [self.title, *self.plain_lines()]
        if self.footer:
            parts.append(self.footer)
        return "\n".join(parts)


# Rows taken by the title, the footer and the panel border
CHROME_ROWS = 5


def visible_window(count: int, cursor: int, viewport: Viewport, rows_per_item: int = 1) -> range:
    """Indexes of the items that fit the viewport, keeping the cursor visible.

    Once the list is longer than the available rows, the window scrolls to
    keep the cursor near its middle.
    """
    capacity = max((viewport.height - CHROME_ROWS) // max(rows_per_item, 1), 1)
    if count <= capacity:
        return range(count)
    start = min(max(cursor - capacity // 2, 0), count - capacity)
    return range(start, start + capacity)
