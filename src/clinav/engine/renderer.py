"""Renderer capability and the machine-backed implementation.

The controller talks to the screen only through :class:`Renderer`. Hosts may
implement it any way they like; :class:`MachineRenderer` implements it by
running the engine's own menu, form and confirmation machines on a
:class:`~clinav.engine.loop.Driver`.
"""

from collections.abc import Sequence
from typing import Protocol, TypeVar

from clinav.catalog.types import MenuEntry, ParameterSpec
from clinav.engine.confirm import ConfirmMachine, ConfirmState
from clinav.engine.events import Viewport
from clinav.engine.form import FormMachine, FormState
from clinav.engine.loop import Driver, EventLoop, StateMachine
from clinav.engine.menu import MenuMachine, MenuState
from clinav.utils.config import TUIConfig

S = TypeVar("S")


class Renderer(Protocol):
    """Drawing and input capability consumed by the controller.

    Each ``render_*`` call blocks until the operator answers and returns
    ``None`` when the operator cancels. ``cleanup`` is called exactly once
    when the session ends, whatever the outcome. Failures raise
    :class:`~clinav.errors.RenderError`.
    """

    def render_menu(self, title: str, entries: Sequence[MenuEntry]) -> int | None: ...

    def render_form(self, title: str, parameters: Sequence[ParameterSpec]) -> dict[str, str] | None: ...

    def render_confirmation(self, title: str, message: str) -> bool | None: ...

    def cleanup(self) -> None: ...


class MachineRenderer:
    """Renderer that hosts the engine's state machines on a driver.

    The last viewport reported by the driver carries over from one prompt to
    the next, so a resize during the menu also applies to the form.

    :param driver: Source of input events and sink for frames
    :param config: Display options
    """

    def __init__(self, driver: Driver, config: TUIConfig | None = None):
        config = config or TUIConfig()
        self.driver = driver
        self.menu_machine = MenuMachine(show_description=config.show_description, search_key=config.search_key)
        self.form_machine = FormMachine(show_description=config.show_description)
        self.confirm_machine = ConfirmMachine()
        self.viewport = Viewport()

    def _run(self, machine: StateMachine[S], state: S) -> S:
        loop = EventLoop(machine, state)
        self.driver.drive(loop)
        self.viewport = loop.state.viewport
        return loop.state

    def render_menu(self, title: str, entries: Sequence[MenuEntry]) -> int | None:
        state = self._run(self.menu_machine, MenuState.create(title, entries, self.viewport))
        return state.selected_index

    def render_form(self, title: str, parameters: Sequence[ParameterSpec]) -> dict[str, str] | None:
        state = self._run(self.form_machine, FormState.create(title, parameters, self.viewport))
        return state.result()

    def render_confirmation(self, title: str, message: str) -> bool | None:
        state = self._run(self.confirm_machine, ConfirmState(title=title, message=message, viewport=self.viewport))
        return state.result()

    def cleanup(self) -> None:
        close = getattr(self.driver, "close", None)
        if close is not None:
            close()
