"""
Session Controller - sequence navigation, parameters and confirmation

One call to :meth:`Controller.run` is one session:

    1. Navigator: pick a runnable command (menu after menu)
    2. Parameter Collector: gather the command's parameters along its scope
    3. Form Engine: let the operator review and edit them
    4. Confirmation Gate: show the resolved command line and ask to proceed

Any stage that reports cancellation ends the session with a cancelled
:class:`SessionResult`; later stages never run. Renderer failures propagate
unchanged. In every case the renderer's ``cleanup()`` runs exactly once.

The controller never executes anything. Hosts pass the result to an
executor such as :class:`clinav.executor.ClickExecutor`.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from rich.markup import escape

from clinav.catalog.builder import Catalog
from clinav.catalog.parameters import ParameterAssignment, apply, collect, command_line
from clinav.engine.loop import EventLoop
from clinav.engine.navigator import MenuCancelled, MenuChoice, NavigationMode, Navigator
from clinav.engine.renderer import Renderer
from clinav.errors import CancellationError, ValidationError
from clinav.utils.config import TUIConfig
from clinav.utils.logger import get_logger

logger = get_logger("controller")


def _empty_values() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one interactive session. Immutable once produced.

    :param selected_path: Names of the chosen command below the root
        (empty when cancelled, or when the root itself was chosen)
    :param values: Final string value of every collected parameter
    :param confirmed: Whether the operator agreed to run the command
    :param cancelled: Whether the operator cancelled at any stage
    :param command_line: Shell-quoted preview of the resolved command
    :param node: Arena index of the chosen command
    :param assignments: Values accepted by the parameter definitions
    :param errors: Values the parameter definitions rejected
    """

    selected_path: tuple[str, ...] = ()
    values: Mapping[str, str] = field(default_factory=_empty_values)
    confirmed: bool = False
    cancelled: bool = False
    command_line: str = ""
    node: int | None = None
    assignments: tuple[ParameterAssignment, ...] = field(default=(), compare=False)
    errors: tuple[ValidationError, ...] = field(default=(), compare=False)

    @classmethod
    def cancelled_result(cls) -> "SessionResult":
        return cls(cancelled=True)

    @property
    def should_execute(self) -> bool:
        return self.confirmed and not self.cancelled

    def raise_if_cancelled(self) -> "SessionResult":
        """Return ``self``, or raise :class:`CancellationError` for a cancelled session."""
        if self.cancelled:
            raise CancellationError("Session cancelled by operator")
        return self


class Controller:
    """Runs interactive sessions over one catalog.

    The catalog is only read, so several controllers (each with its own
    renderer) may share it.

    :param catalog: Catalog to choose from
    :param renderer: Screen and input capability
    :param config: Session options; defaults to :class:`TUIConfig` defaults
    """

    def __init__(self, catalog: Catalog, renderer: Renderer, config: TUIConfig | None = None):
        self.catalog = catalog
        self.renderer = renderer
        self.config = config or TUIConfig()

    def run(self) -> SessionResult:
        """Run one session and return its result.

        :raises RenderError: If the renderer fails; ``cleanup()`` has run
        """
        try:
            return self._session()
        finally:
            self.renderer.cleanup()

    def _navigate(self, navigator: Navigator):
        loop = EventLoop(navigator, navigator.initial_state())
        loop.start()
        while not loop.done:
            request = navigator.menu(loop.state)
            choice = self.renderer.render_menu(request.title, request.entries)
            loop.dispatch(MenuCancelled() if choice is None else MenuChoice(choice))
        return loop.state

    def _session(self) -> SessionResult:
        navigator = Navigator(self.catalog, flat=self.config.flat)
        state = self._navigate(navigator)
        if state.mode is NavigationMode.CANCELLED:
            logger.info("Session cancelled while choosing a command")
            return SessionResult.cancelled_result()

        index = state.selected
        full_path = self.catalog.full_path(index)
        logger.key_info(f"Selected command: {escape(full_path)}")

        specs = collect(self.catalog, index)
        values = {spec.name: spec.current_value for spec in specs}
        if specs and self.config.show_parameters:
            answered = self.renderer.render_form(f"Configure: {full_path}", specs)
            if answered is None:
                logger.info("Session cancelled in the parameter form")
                return SessionResult.cancelled_result()
            values.update(answered)

        applied = apply(self.catalog, index, values)
        for error in applied.errors:
            logger.warning(f"Parameter not applied: {escape(str(error))}")
        preview = command_line(self.catalog, index, applied.assignments)

        confirmed = True
        if self.config.confirm_before_execute:
            answer = self.renderer.render_confirmation("Confirm Execution", f"Command to execute:\n\n  {preview}")
            if answer is None:
                logger.info("Session cancelled at confirmation")
                return SessionResult.cancelled_result()
            confirmed = answer

        logger.debug(f"Session finished: {escape(preview)} (confirmed={confirmed})")
        return SessionResult(
            selected_path=navigator.selected_path(state),
            values=MappingProxyType(values),
            confirmed=confirmed,
            cancelled=False,
            command_line=preview,
            node=index,
            assignments=applied.assignments,
            errors=applied.errors,
        )
