"""
Navigator - walk the catalog one menu at a time

The navigator decides *which* menu to show and what a choice means; the
per-key browsing and searching inside each menu is the job of
:class:`~clinav.engine.menu.MenuMachine`, hosted by the renderer's
``render_menu``. The controller feeds each menu answer back in as a
:class:`MenuChoice` or :class:`MenuCancelled` event.

States:
    - ``BROWSING`` at level ``len(path)``: waiting for a choice among the
      children of the last node in ``path`` (the root when empty)
    - ``LEAF_SELECTED``: a runnable node was chosen; final
    - ``CANCELLED``: the operator backed out; final, no path is kept

Tree mode descends into any entry that has children. A node that is runnable
*and* has children is offered as a leading "run" entry at its own level, so
it stays reachable. Flat mode shows every runnable node at once, labelled
with its display path.
"""

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType

from clinav.catalog.builder import Catalog, flatten
from clinav.catalog.types import MenuEntry
from clinav.engine.events import CancelEvent
from clinav.engine.frames import Frame, FrameStyle, Segment
from clinav.engine.loop import Action
from clinav.errors import RenderError


class NavigationMode(Enum):
    BROWSING = "browsing"
    LEAF_SELECTED = "leaf_selected"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MenuChoice:
    """The renderer's answer to a menu: position of the chosen entry."""

    index: int


@dataclass(frozen=True)
class MenuCancelled:
    """The renderer reported that the menu was cancelled."""


@dataclass(frozen=True)
class MenuRequest:
    """What the renderer should show next."""

    title: str
    entries: tuple[MenuEntry, ...]


@dataclass(frozen=True)
class NavigationState:
    """Progress through the catalog.

    :param path: Arena indexes of the groups descended into, root excluded
    :param selected: Arena index of the chosen node once ``LEAF_SELECTED``
    """

    path: tuple[int, ...] = ()
    mode: NavigationMode = NavigationMode.BROWSING
    selected: int | None = None

    @property
    def level(self) -> int:
        return len(self.path)

    @property
    def finished(self) -> bool:
        return self.mode is not NavigationMode.BROWSING


def _metadata(**values) -> MappingProxyType:
    return MappingProxyType(values)


class Navigator:
    """State machine that turns menu answers into a selected catalog node.

    :param catalog: Catalog to walk
    :param flat: Show one flattened list instead of descending level by level
    :param title: Title of the first menu
    """

    def __init__(self, catalog: Catalog, flat: bool = False, title: str = "Select a command"):
        self.catalog = catalog
        self.flat = flat
        self.title = title

    def initial_state(self) -> NavigationState:
        return NavigationState()

    def current_node(self, state: NavigationState) -> int:
        return state.path[-1] if state.path else Catalog.ROOT

    def initialize(self, state: NavigationState) -> Action | None:
        return Action.QUIT if state.finished else None

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    def entries(self, state: NavigationState) -> tuple[MenuEntry, ...]:
        if self.flat:
            return tuple(
                MenuEntry(
                    id=entry.id,
                    label=entry.display_path,
                    description=entry.short_description,
                    metadata=_metadata(node=entry.index),
                )
                for entry in flatten(self.catalog)
            )

        node = self.catalog.node(self.current_node(state))
        entries = []
        if node.runnable and (node.has_children or node.is_root):
            entries.append(
                MenuEntry(
                    id=node.id,
                    label=f"[run] {node.name}",
                    description=node.short_description,
                    metadata=_metadata(node=node.index, runs_self=True),
                )
            )
        for child in self.catalog.children(node.index):
            entries.append(
                MenuEntry(
                    id=child.id,
                    label=child.name,
                    description=child.short_description,
                    disabled=not child.runnable and not child.has_children,
                    metadata=_metadata(node=child.index, group=child.has_children),
                )
            )
        return tuple(entries)

    def menu_title(self, state: NavigationState) -> str:
        if self.flat or not state.path:
            return self.title
        return f"{self.title}: {self.catalog.full_path(self.current_node(state))}"

    def menu(self, state: NavigationState) -> MenuRequest:
        return MenuRequest(title=self.menu_title(state), entries=self.entries(state))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def handle_event(self, state: NavigationState, event) -> tuple[NavigationState, Action | None]:
        if state.finished:
            return state, Action.QUIT
        if isinstance(event, (MenuCancelled, CancelEvent)):
            return NavigationState(mode=NavigationMode.CANCELLED), Action.QUIT
        if not isinstance(event, MenuChoice):
            return state, None

        entries = self.entries(state)
        if not 0 <= event.index < len(entries):
            raise RenderError(f"Renderer chose menu entry {event.index} of {len(entries)}")
        entry = entries[event.index]
        if entry.disabled:
            return state, None

        node = self.catalog.node(entry.metadata["node"])
        if self.flat or entry.metadata.get("runs_self") or not node.has_children:
            return replace(state, mode=NavigationMode.LEAF_SELECTED, selected=node.index), Action.QUIT
        return replace(state, path=state.path + (node.index,)), None

    def render(self, state: NavigationState) -> Frame:
        """Breadcrumb of the walk so far."""
        if state.mode is NavigationMode.LEAF_SELECTED:
            status = Segment(f"Selected: {self.catalog.full_path(state.selected)}", FrameStyle.VALUE)
        elif state.mode is NavigationMode.CANCELLED:
            status = Segment("Cancelled", FrameStyle.DISABLED)
        else:
            status = Segment(self.catalog.full_path(self.current_node(state)), FrameStyle.LABEL)
        return Frame(title=self.title, lines=((status,),))

    def selected_path(self, state: NavigationState) -> tuple[str, ...]:
        """Names of the chosen node below the root, or ``()`` unless a leaf was selected."""
        if state.mode is not NavigationMode.LEAF_SELECTED or state.selected is None:
            return ()
        return self.catalog.path_names(state.selected)
