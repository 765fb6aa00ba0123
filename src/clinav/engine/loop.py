"""
Render Loop - single-threaded cooperative host for the engine's state machines

Every interactive piece of the engine (menu, navigator, form, confirmation)
is a :class:`StateMachine`: an immutable state plus three pure functions.

    - ``initialize(state)`` may end the machine before any input arrives
    - ``handle_event(state, event)`` returns the next state and an optional
      follow-up :class:`Action`
    - ``render(state)`` returns a :class:`~clinav.engine.frames.Frame`

:class:`EventLoop` holds the current state of one machine and applies events
one at a time, each running to completion before the next is accepted.
Reading input and drawing frames belong to a :class:`Driver`, which sits
outside the transition functions: :class:`ScriptedDriver` replays a fixed
event sequence, :class:`~clinav.interfaces.tui.driver.PromptToolkitDriver`
reads a real terminal.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Generic, Protocol, TypeVar

from clinav.engine.events import Event, KeyEvent
from clinav.engine.frames import Frame
from clinav.errors import RenderError

S = TypeVar("S")


class Action(Enum):
    """Follow-up requested by a transition."""

    QUIT = "quit"


class StateMachine(Protocol[S]):
    def initialize(self, state: S) -> Action | None: ...

    def handle_event(self, state: S, event: Event) -> tuple[S, Action | None]: ...

    def render(self, state: S) -> Frame: ...


class EventLoop(Generic[S]):
    """Current state of one machine, advanced one event at a time."""

    def __init__(self, machine: StateMachine[S], state: S):
        self.machine = machine
        self._state = state
        self._started = False
        self._done = False

    @property
    def state(self) -> S:
        return self._state

    @property
    def done(self) -> bool:
        return self._done

    def start(self) -> bool:
        """Run ``initialize`` once. Returns whether the machine already finished."""
        if not self._started:
            self._started = True
            self._done = self.machine.initialize(self._state) is Action.QUIT
        return self._done

    def dispatch(self, event: Event) -> bool:
        """Apply one event. Returns whether the machine has finished."""
        if not self.start():
            self._state, action = self.machine.handle_event(self._state, event)
            self._done = action is Action.QUIT
        return self._done

    def frame(self) -> Frame:
        return self.machine.render(self._state)


class Driver(Protocol):
    """Feeds input into an :class:`EventLoop` and draws its frames.

    ``drive`` returns once ``loop.done`` is true and raises
    :class:`~clinav.errors.RenderError` if input or output fails.
    """

    def drive(self, loop: EventLoop) -> None: ...


class ScriptedDriver:
    """Driver that replays a fixed sequence of events.

    The same event iterator is shared by every loop this driver runs, so one
    script can answer a menu, a form and a confirmation in turn.

    :param events: Events to replay
    :param on_frame: Optional callback receiving each frame before the next event
    """

    def __init__(self, events: Iterable[Event], on_frame: Callable[[Frame], None] | None = None):
        self._events = iter(events)
        self.on_frame = on_frame

    def drive(self, loop: EventLoop) -> None:
        if loop.start():
            return
        while not loop.done:
            if self.on_frame is not None:
                self.on_frame(loop.frame())
            try:
                event = next(self._events)
            except StopIteration:
                raise RenderError("Input ended before the prompt was answered") from None
            loop.dispatch(event)


def run_machine(
    machine: StateMachine[S],
    state: S,
    events: Iterable[Event],
    on_frame: Callable[[Frame], None] | None = None,
) -> S:
    """Run a machine over a list of events and return its final state.

    :raises RenderError: If the events run out before the machine finishes
    """
    loop = EventLoop(machine, state)
    ScriptedDriver(events, on_frame).drive(loop)
    return loop.state


def keys(*names: str) -> list[KeyEvent]:
    """Key events for a sequence of key names: ``keys("down", "down", "enter")``."""
    return [KeyEvent(name) for name in names]


def typed(text: str) -> list[KeyEvent]:
    """One key event per character of ``text``."""
    return [KeyEvent(char) for char in text]
