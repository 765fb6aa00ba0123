"""Line-oriented renderer built on questionary prompts.

Suited to terminals where a redrawn panel is unwelcome (screen readers,
recorded sessions). Menus get questionary's type-to-filter search; the form
asks for each parameter in turn and re-asks until the value is accepted.
ESC or Ctrl+C at any prompt cancels the session.
"""

from collections.abc import Sequence

import questionary
from prompt_toolkit.key_binding import merge_key_bindings
from questionary import Choice

from clinav.catalog.types import MenuEntry, ParameterSpec, ParameterType
from clinav.catalog.values import BOOL_FALSE, BOOL_TRUE
from clinav.cli.styles import (
    ColorTheme,
    Messages,
    build_questionary_style,
    get_key_bindings,
    get_theme,
    make_console,
)
from clinav.errors import RenderError, ValidationError
from clinav.utils.config import TUIConfig
from clinav.utils.logger import get_logger

logger = get_logger("prompt")


class _Cancelled(Exception):
    pass


class PromptRenderer:
    """:class:`~clinav.engine.renderer.Renderer` using questionary.

    :param config: Session options (``theme`` and ``show_description``)
    :param theme: Overrides ``config.theme``
    :param console: Rich console for messages; a themed stdout console by default
    """

    def __init__(self, config: TUIConfig | None = None, theme: ColorTheme | None = None, console=None):
        self.config = config or TUIConfig()
        self.theme = theme or get_theme(self.config.theme)
        self.style = build_questionary_style(self.theme)
        self.console = console or make_console(self.theme)

    def _ask(self, question):
        """Ask one question; ESC aborts like Ctrl+C."""
        application = question.application
        application.key_bindings = merge_key_bindings([application.key_bindings, get_key_bindings()])
        try:
            return question.unsafe_ask()
        except KeyboardInterrupt:
            raise _Cancelled() from None
        except (OSError, EOFError) as e:
            raise RenderError(f"Prompt input failed: {e}") from e

    def _entry_title(self, entry: MenuEntry) -> str:
        if self.config.show_description and entry.description:
            return f"{entry.label} - {entry.description}"
        return entry.label

    def render_menu(self, title: str, entries: Sequence[MenuEntry]) -> int | None:
        choices = [
            Choice(self._entry_title(entry), value=position, disabled="nothing to run" if entry.disabled else None)
            for position, entry in enumerate(entries)
        ]
        if not entries:
            self.console.print(Messages.warning(f"No matches in {title}"))
            return None
        if all(entry.disabled for entry in entries):
            raise RenderError(f"Nothing to choose from in '{title}'")
        question = questionary.select(
            f"{title}:",
            choices=choices,
            style=self.style,
            use_search_filter=True,
            use_jk_keys=False,
            instruction="(type to filter, esc to cancel)",
        )
        try:
            return self._ask(question)
        except _Cancelled:
            return None

    def _parameter_question(self, spec: ParameterSpec, current: str):
        label = f"{spec.name}{'*' if spec.required else ''}"
        if spec.source_scope:
            label = f"{label} (from {spec.source_scope})"
        instruction = spec.description if self.config.show_description and spec.description else None

        if spec.type is ParameterType.BOOL:
            return questionary.confirm(
                f"{label}:",
                default=current == BOOL_TRUE,
                style=self.style,
                instruction=instruction,
            )

        if spec.type is ParameterType.ENUM and spec.options:
            choices = [Choice(option.display, value=option.value) for option in spec.options]
            if not spec.required:
                choices.insert(0, Choice("(unset)", value=""))
            default = current if current in spec.option_values or (current == "" and not spec.required) else None
            return questionary.select(
                f"{label}:",
                choices=choices,
                default=default,
                style=self.style,
                instruction=instruction,
            )

        def validate(text: str):
            try:
                spec.validate(text)
            except ValidationError as e:
                return e.message
            return True

        return questionary.text(
            f"{label}:",
            default=current,
            validate=validate,
            style=self.style,
            instruction=instruction,
        )

    def render_form(self, title: str, parameters: Sequence[ParameterSpec]) -> dict[str, str] | None:
        self.console.print(f"[header]{title}[/header]")
        values = {}
        for spec in parameters:
            try:
                answer = self._ask(self._parameter_question(spec, spec.current_value))
            except _Cancelled:
                logger.debug(f"Form cancelled at '{spec.name}'")
                return None
            if isinstance(answer, bool):
                answer = BOOL_TRUE if answer else BOOL_FALSE
            values[spec.name] = answer
        return values

    def render_confirmation(self, title: str, message: str) -> bool | None:
        self.console.print(f"[header]{title}[/header]")
        self.console.print(message, markup=False, highlight=False)
        try:
            return bool(self._ask(questionary.confirm("Proceed?", default=True, style=self.style)))
        except _Cancelled:
            return None

    def cleanup(self) -> None:
        logger.debug("Prompt renderer finished")
