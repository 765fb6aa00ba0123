"""
Form Engine - review and edit typed parameter values

The form starts in ``NAVIGATING`` mode with every parameter at its current
(default) value.

Navigating keys:
    - ``up``/``k``/``shift-tab``, ``down``/``j``/``tab``: move between parameters
    - ``left``/``right``/space on a boolean: flip between ``true`` and ``false``
    - ``left``/``right`` on an enum: cycle through the options
    - ``e`` or ``r``: edit the current (non-boolean) value in a buffer
    - ``enter``: submit the form; refused while a required value is empty
    - ``escape``, ``q``, ``ctrl-c``: cancel

Editing keys:
    - printable characters append, ``backspace`` deletes, ``ctrl-u`` clears
    - ``enter`` commits the buffer only if the parameter accepts it;
      otherwise the error is shown and editing continues with the committed
      value untouched
    - ``escape`` discards the buffer
    - ``ctrl-c`` cancels the whole form
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType

from clinav.catalog.types import ParameterSpec, ParameterType
from clinav.catalog.values import BOOL_FALSE, BOOL_TRUE
from clinav.engine.events import CancelEvent, Event, Keys, ResizeEvent, Viewport
from clinav.engine.frames import Frame, FrameStyle, Line, Segment, visible_window
from clinav.engine.loop import Action
from clinav.errors import ValidationError


class FormMode(Enum):
    NAVIGATING = "navigating"
    EDITING = "editing"


class FormOutcome(Enum):
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FormState:
    """State of one form. ``values`` maps parameter name to its committed string."""

    title: str
    parameters: tuple[ParameterSpec, ...]
    values: Mapping[str, str]
    cursor: int = 0
    mode: FormMode = FormMode.NAVIGATING
    edit_buffer: str = ""
    error: str | None = None
    outcome: FormOutcome | None = None
    viewport: Viewport = Viewport()

    @classmethod
    def create(cls, title: str, parameters: Sequence[ParameterSpec], viewport: Viewport = Viewport()) -> "FormState":
        parameters = tuple(parameters)
        values = MappingProxyType({spec.name: spec.current_value for spec in parameters})
        return cls(title=title, parameters=parameters, values=values, viewport=viewport)

    @property
    def edit_mode(self) -> bool:
        return self.mode is FormMode.EDITING

    @property
    def current(self) -> ParameterSpec | None:
        if not self.parameters:
            return None
        return self.parameters[self.cursor]

    def current_value(self, name: str) -> str:
        return self.values[name]

    def result(self) -> dict[str, str] | None:
        """Final values, or ``None`` unless the form was submitted."""
        if self.outcome is not FormOutcome.SUBMITTED:
            return None
        return dict(self.values)


def _with_value(state: FormState, name: str, value: str) -> FormState:
    values = dict(state.values)
    values[name] = value
    return replace(state, values=MappingProxyType(values))


class FormMachine:
    """State machine for parameter forms.

    :param show_description: Render parameter descriptions under each row
    """

    def __init__(self, show_description: bool = True):
        self.show_description = show_description

    def initialize(self, state: FormState) -> Action | None:
        return Action.QUIT if state.outcome is not None else None

    def handle_event(self, state: FormState, event: Event) -> tuple[FormState, Action | None]:
        if isinstance(event, ResizeEvent):
            return replace(state, viewport=event.viewport), None
        if isinstance(event, CancelEvent):
            return self._finish(state, FormOutcome.CANCELLED)
        if state.mode is FormMode.EDITING:
            return self._editing(state, event.key, event.is_character)
        return self._navigating(state, event.key)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _navigating(self, state: FormState, key: str) -> tuple[FormState, Action | None]:
        spec = state.current

        if key in (Keys.UP, "k", Keys.SHIFT_TAB):
            return self._move(state, -1), None
        if key in (Keys.DOWN, "j", Keys.TAB):
            return self._move(state, 1), None
        if key in (Keys.ESCAPE, "q", Keys.CTRL_C):
            return self._finish(state, FormOutcome.CANCELLED)
        if key == Keys.ENTER:
            return self._submit(state)
        if spec is None:
            return state, None

        if spec.type is ParameterType.BOOL and key in (Keys.LEFT, Keys.RIGHT, Keys.SPACE):
            current = state.values[spec.name].strip().lower()
            flipped = BOOL_FALSE if current == BOOL_TRUE else BOOL_TRUE
            return replace(_with_value(state, spec.name, flipped), error=None), None
        if spec.type is ParameterType.ENUM and spec.options and key in (Keys.LEFT, Keys.RIGHT):
            return self._cycle(state, spec, -1 if key == Keys.LEFT else 1), None
        if key in ("e", "r") and spec.type is not ParameterType.BOOL:
            return replace(state, mode=FormMode.EDITING, edit_buffer=state.values[spec.name], error=None), None
        return state, None

    def _editing(self, state: FormState, key: str, is_character: bool) -> tuple[FormState, Action | None]:
        spec = state.current

        if key == Keys.ENTER:
            try:
                spec.validate(state.edit_buffer)
            except ValidationError as exc:
                return replace(state, error=exc.message), None
            committed = _with_value(state, spec.name, state.edit_buffer)
            return replace(committed, mode=FormMode.NAVIGATING, edit_buffer="", error=None), None
        if key == Keys.ESCAPE:
            return replace(state, mode=FormMode.NAVIGATING, edit_buffer="", error=None), None
        if key == Keys.CTRL_C:
            return self._finish(state, FormOutcome.CANCELLED)
        if key == Keys.BACKSPACE:
            return replace(state, edit_buffer=state.edit_buffer[:-1], error=None), None
        if key == Keys.CTRL_U:
            return replace(state, edit_buffer="", error=None), None
        if is_character:
            return replace(state, edit_buffer=state.edit_buffer + key, error=None), None
        return state, None

    def _move(self, state: FormState, delta: int) -> FormState:
        if not state.parameters:
            return state
        cursor = min(max(state.cursor + delta, 0), len(state.parameters) - 1)
        return replace(state, cursor=cursor, error=None)

    def _cycle(self, state: FormState, spec: ParameterSpec, delta: int) -> FormState:
        options = spec.option_values
        current = state.values[spec.name]
        position = options.index(current) if current in options else (-1 if delta > 0 else 0)
        return replace(_with_value(state, spec.name, options[(position + delta) % len(options)]), error=None)

    def _submit(self, state: FormState) -> tuple[FormState, Action | None]:
        for position, spec in enumerate(state.parameters):
            if spec.required and state.values[spec.name] == "":
                return replace(state, cursor=position, error=f"'{spec.name}' is required"), None
        return self._finish(state, FormOutcome.SUBMITTED)

    def _finish(self, state: FormState, outcome: FormOutcome) -> tuple[FormState, Action | None]:
        return replace(state, outcome=outcome, mode=FormMode.NAVIGATING, edit_buffer=""), Action.QUIT

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, state: FormState) -> Frame:
        lines: list[Line] = []
        if not state.parameters:
            lines.append((Segment("  No parameters to configure", FrameStyle.DISABLED),))

        rows = 2 if self.show_description else 1
        previous_scope = None
        for position in visible_window(len(state.parameters), state.cursor, state.viewport, rows):
            spec = state.parameters[position]
            if spec.source_scope != previous_scope and position > 0:
                lines.append((Segment(f"  from {spec.source_scope}", FrameStyle.SCOPE),))
            previous_scope = spec.source_scope
            lines.append(self._parameter_line(state, position, spec))
            if self.show_description and spec.description:
                lines.append((Segment(f"      {spec.description}", FrameStyle.DESCRIPTION),))

        if state.error:
            lines.append((Segment(f"✗ {state.error}", FrameStyle.ERROR),))

        return Frame(title=state.title, lines=tuple(lines), footer=self._footer(state), viewport=state.viewport)

    def _parameter_line(self, state: FormState, position: int, spec: ParameterSpec) -> Line:
        active = position == state.cursor
        label_style = FrameStyle.CURSOR if active else FrameStyle.LABEL
        marker = "*" if spec.required else ""
        segments = [
            Segment("❯ " if active else "  ", label_style),
            Segment(f"{spec.name}{marker}", label_style),
            Segment(f" ({spec.type.value}) ", FrameStyle.DESCRIPTION),
        ]

        if active and state.mode is FormMode.EDITING:
            segments.append(Segment(state.edit_buffer + "▏", FrameStyle.EDIT))
        else:
            value = state.values[spec.name]
            if value == "":
                segments.append(Segment("(unset)", FrameStyle.DISABLED))
            else:
                segments.append(Segment(value, FrameStyle.VALUE))
            if spec.type is ParameterType.ENUM and spec.options and active:
                segments.append(Segment(f"  [{' | '.join(spec.option_values)}]", FrameStyle.DESCRIPTION))
        return tuple(segments)

    def _footer(self, state: FormState) -> str:
        if state.mode is FormMode.EDITING:
            return "type value • enter commit • esc discard"
        spec = state.current
        hints = ["↑/↓ move"]
        if spec is not None and spec.type is ParameterType.BOOL:
            hints.append("←/→ toggle")
        elif spec is not None and spec.type is ParameterType.ENUM and spec.options:
            hints.append("←/→ choose • e edit")
        elif spec is not None:
            hints.append("e edit")
        hints.extend(["enter run", "esc cancel"])
        return " • ".join(hints)
