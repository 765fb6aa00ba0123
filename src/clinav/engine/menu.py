"""
Menu Machine - browse and search one list of entries

One level of navigation at key granularity. The machine starts in
``BROWSING`` mode; the search key switches to ``SEARCHING`` where typed
characters narrow the list through :mod:`clinav.engine.search`.

Browsing keys:
    - ``up``/``k``, ``down``/``j``: move the cursor (clamped, no wraparound)
    - ``enter``/space: select the entry under the cursor unless it is disabled
    - ``/`` or ``ctrl-s``: start searching
    - ``ctrl-r``: clear a filter kept from a previous search
    - ``escape``, ``q``, ``ctrl-c``: cancel

Searching keys:
    - printable characters, ``backspace``, ``ctrl-u``: edit the query; every
      change refilters and moves the cursor back to the first match
    - ``up``/``down``: move within the matches
    - ``enter``: select, as in browsing
    - ``tab``: keep the filter and go back to browsing
    - ``escape``: clear the query and go back to browsing
    - ``ctrl-c``: cancel
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from clinav.catalog.types import MenuEntry
from clinav.engine.events import CancelEvent, Event, Keys, ResizeEvent, Viewport
from clinav.engine.frames import Frame, FrameStyle, Line, Segment, visible_window
from clinav.engine.loop import Action
from clinav.engine.search import highlight_span, matching_indexes


class MenuMode(Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"


class MenuOutcome(Enum):
    SELECTED = "selected"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MenuState:
    """State of one menu.

    ``filtered`` holds positions in ``entries``; entries themselves are never
    reordered. ``cursor`` indexes ``filtered``.
    """

    title: str
    entries: tuple[MenuEntry, ...]
    filtered: tuple[int, ...]
    cursor: int = 0
    query: str = ""
    mode: MenuMode = MenuMode.BROWSING
    outcome: MenuOutcome | None = None
    viewport: Viewport = Viewport()

    @classmethod
    def create(cls, title: str, entries: Sequence[MenuEntry], viewport: Viewport = Viewport()) -> "MenuState":
        entries = tuple(entries)
        return cls(title=title, entries=entries, filtered=tuple(range(len(entries))), viewport=viewport)

    @property
    def visible_entries(self) -> list[MenuEntry]:
        return [self.entries[index] for index in self.filtered]

    @property
    def current(self) -> MenuEntry | None:
        if not self.filtered:
            return None
        return self.entries[self.filtered[self.cursor]]

    @property
    def selected_index(self) -> int | None:
        """Position in ``entries`` of the chosen entry, once selected."""
        if self.outcome is not MenuOutcome.SELECTED:
            return None
        return self.filtered[self.cursor]


class MenuMachine:
    """State machine for a single menu.

    :param show_description: Render entry descriptions next to labels
    :param search_key: Key that starts searching while browsing
    """

    def __init__(self, show_description: bool = True, search_key: str = "/"):
        self.show_description = show_description
        self.search_key = search_key

    def initialize(self, state: MenuState) -> Action | None:
        return Action.QUIT if state.outcome is not None else None

    def handle_event(self, state: MenuState, event: Event) -> tuple[MenuState, Action | None]:
        if isinstance(event, ResizeEvent):
            return replace(state, viewport=event.viewport), None
        if isinstance(event, CancelEvent):
            return self._finish(state, MenuOutcome.CANCELLED)
        if state.mode is MenuMode.SEARCHING:
            return self._searching(state, event.key, event.is_character)
        return self._browsing(state, event.key)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _browsing(self, state: MenuState, key: str) -> tuple[MenuState, Action | None]:
        if key in (Keys.UP, "k"):
            return self._move(state, -1), None
        if key in (Keys.DOWN, "j"):
            return self._move(state, 1), None
        if key in (Keys.ENTER, Keys.SPACE):
            return self._select(state)
        if key in (self.search_key, Keys.CTRL_S):
            return replace(state, mode=MenuMode.SEARCHING), None
        if key == Keys.CTRL_R:
            return self._set_query(state, ""), None
        if key in (Keys.ESCAPE, "q", Keys.CTRL_C):
            return self._finish(state, MenuOutcome.CANCELLED)
        return state, None

    def _searching(self, state: MenuState, key: str, is_character: bool) -> tuple[MenuState, Action | None]:
        if key == Keys.ESCAPE:
            return replace(self._set_query(state, ""), mode=MenuMode.BROWSING), None
        if key == Keys.CTRL_C:
            return self._finish(state, MenuOutcome.CANCELLED)
        if key == Keys.ENTER:
            return self._select(state)
        if key == Keys.TAB:
            return replace(state, mode=MenuMode.BROWSING), None
        if key == Keys.UP:
            return self._move(state, -1), None
        if key == Keys.DOWN:
            return self._move(state, 1), None
        if key == Keys.BACKSPACE:
            return self._set_query(state, state.query[:-1]), None
        if key == Keys.CTRL_U:
            return self._set_query(state, ""), None
        if is_character:
            return self._set_query(state, state.query + key), None
        return state, None

    def _move(self, state: MenuState, delta: int) -> MenuState:
        if not state.filtered:
            return state
        cursor = min(max(state.cursor + delta, 0), len(state.filtered) - 1)
        return replace(state, cursor=cursor)

    def _set_query(self, state: MenuState, query: str) -> MenuState:
        if query == state.query:
            return state
        return replace(state, query=query, filtered=matching_indexes(state.entries, query), cursor=0)

    def _select(self, state: MenuState) -> tuple[MenuState, Action | None]:
        entry = state.current
        if entry is None or entry.disabled:
            return state, None
        return self._finish(state, MenuOutcome.SELECTED)

    def _finish(self, state: MenuState, outcome: MenuOutcome) -> tuple[MenuState, Action | None]:
        return replace(state, outcome=outcome), Action.QUIT

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, state: MenuState) -> Frame:
        lines: list[Line] = []

        if state.mode is MenuMode.SEARCHING or state.query:
            cursor_mark = "▏" if state.mode is MenuMode.SEARCHING else ""
            lines.append(
                (
                    Segment("Search: ", FrameStyle.LABEL),
                    Segment(state.query + cursor_mark, FrameStyle.QUERY),
                    Segment(f"  ({len(state.filtered)}/{len(state.entries)})", FrameStyle.DESCRIPTION),
                )
            )

        if not state.filtered:
            lines.append((Segment("  No matching commands", FrameStyle.DISABLED),))

        for position in visible_window(len(state.filtered), state.cursor, state.viewport):
            entry = state.entries[state.filtered[position]]
            lines.append(self._entry_line(entry, position == state.cursor, state.query))

        return Frame(title=state.title, lines=tuple(lines), footer=self._footer(state), viewport=state.viewport)

    def _entry_line(self, entry: MenuEntry, active: bool, query: str) -> Line:
        if entry.disabled:
            base = FrameStyle.DISABLED
        elif active:
            base = FrameStyle.CURSOR
        else:
            base = FrameStyle.ENTRY

        segments = [Segment("❯ " if active else "  ", base)]
        segments.extend(_highlighted(entry.label, query, base))
        if entry.metadata.get("group"):
            segments.append(Segment(" ›", base))
        if self.show_description and entry.description:
            segments.append(Segment("  "))
            segments.extend(_highlighted(entry.description, query, FrameStyle.DESCRIPTION))
        return tuple(segments)

    def _footer(self, state: MenuState) -> str:
        if state.mode is MenuMode.SEARCHING:
            return "type to filter • ↑/↓ move • enter select • tab browse • esc clear"
        hints = ["↑/↓ move", "enter select", f"{self.search_key} search"]
        if state.query:
            hints.append("ctrl-r clear filter")
        hints.append("esc cancel")
        return " • ".join(hints)


def _highlighted(text: str, query: str, style: str) -> list[Segment]:
    span = highlight_span(text, query)
    if span is None:
        return [Segment(text, style)]
    start, end = span
    parts = [
        Segment(text[:start], style),
        Segment(text[start:end], FrameStyle.HIGHLIGHT),
        Segment(text[end:], style),
    ]
    return [part for part in parts if part.text]
