"""Confirmation Gate - a yes/no prompt.

Choice ``0`` confirms and is the default; ``1`` denies. ``left``/``h``,
``right``/``l`` and ``tab`` move between the two buttons, ``y`` and ``n``
answer directly, ``enter``/space finalize, ``escape``/``q``/``ctrl-c`` cancel.
"""

from dataclasses import dataclass, replace
from enum import Enum

from clinav.engine.events import CancelEvent, Event, Keys, ResizeEvent, Viewport
from clinav.engine.frames import Frame, FrameStyle, Segment
from clinav.engine.loop import Action

CONFIRM = 0
DENY = 1


class ConfirmOutcome(Enum):
    CONFIRMED = "confirmed"
    DENIED = "denied"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ConfirmState:
    title: str
    message: str
    cursor: int = CONFIRM
    outcome: ConfirmOutcome | None = None
    viewport: Viewport = Viewport()

    def result(self) -> bool | None:
        """``True``/``False`` once answered, ``None`` if cancelled or pending."""
        if self.outcome is ConfirmOutcome.CONFIRMED:
            return True
        if self.outcome is ConfirmOutcome.DENIED:
            return False
        return None


class ConfirmMachine:
    def __init__(self, confirm_label: str = "Yes", deny_label: str = "No"):
        self.confirm_label = confirm_label
        self.deny_label = deny_label

    def initialize(self, state: ConfirmState) -> Action | None:
        return Action.QUIT if state.outcome is not None else None

    def handle_event(self, state: ConfirmState, event: Event) -> tuple[ConfirmState, Action | None]:
        if isinstance(event, ResizeEvent):
            return replace(state, viewport=event.viewport), None
        if isinstance(event, CancelEvent):
            return replace(state, outcome=ConfirmOutcome.CANCELLED), Action.QUIT

        key = event.key
        if key in (Keys.LEFT, "h"):
            return replace(state, cursor=CONFIRM), None
        if key in (Keys.RIGHT, "l"):
            return replace(state, cursor=DENY), None
        if key in (Keys.TAB, Keys.SHIFT_TAB):
            return replace(state, cursor=DENY if state.cursor == CONFIRM else CONFIRM), None
        if key in (Keys.ENTER, Keys.SPACE):
            outcome = ConfirmOutcome.CONFIRMED if state.cursor == CONFIRM else ConfirmOutcome.DENIED
            return replace(state, outcome=outcome), Action.QUIT
        if key in ("y", "Y"):
            return replace(state, cursor=CONFIRM, outcome=ConfirmOutcome.CONFIRMED), Action.QUIT
        if key in ("n", "N"):
            return replace(state, cursor=DENY, outcome=ConfirmOutcome.DENIED), Action.QUIT
        if key in (Keys.ESCAPE, "q", Keys.CTRL_C):
            return replace(state, outcome=ConfirmOutcome.CANCELLED), Action.QUIT
        return state, None

    def render(self, state: ConfirmState) -> Frame:
        lines = [(Segment(line, FrameStyle.ENTRY),) for line in state.message.splitlines()]
        lines.append(())
        buttons = []
        for position, label in ((CONFIRM, self.confirm_label), (DENY, self.deny_label)):
            style = FrameStyle.BUTTON_ACTIVE if position == state.cursor else FrameStyle.BUTTON
            buttons.append(Segment(f"  {label}  ", style))
            buttons.append(Segment("   "))
        lines.append(tuple(buttons[:-1]))
        return Frame(
            title=state.title,
            lines=tuple(lines),
            footer="←/→ choose • enter accept • y/n answer • esc cancel",
            viewport=state.viewport,
        )
