"""Tests for the questionary-based renderer."""

from io import StringIO
from unittest.mock import patch

import pytest

from clinav.catalog.types import MenuEntry, ParameterOption, ParameterSpec, ParameterType
from clinav.cli.styles import make_console
from clinav.errors import RenderError
from clinav.interfaces.prompt import PromptRenderer
from clinav.utils.config import TUIConfig

ENTRIES = (
    MenuEntry(id="deploy", label="deploy", description="Deploy a service"),
    MenuEntry(id="legacy", label="legacy", disabled=True),
)


@pytest.fixture
def output():
    return StringIO()


@pytest.fixture
def renderer(output):
    return PromptRenderer(TUIConfig(theme="nord"), console=make_console(None, file=output, color_system=None))


@pytest.fixture
def mock_questionary():
    with patch("clinav.interfaces.prompt.renderer.questionary") as mocked:
        yield mocked


def _answers(prompt, value=None, error=None):
    question = prompt.return_value
    question.application.key_bindings = None
    if error is not None:
        question.unsafe_ask.side_effect = error
    else:
        question.unsafe_ask.return_value = value
    return question


class TestRenderMenu:
    """Test menus as questionary selects."""

    def test_choice_returned(self, renderer, mock_questionary):
        """The selected position is returned."""
        _answers(mock_questionary.select, 0)

        assert renderer.render_menu("Select a command", ENTRIES) == 0

        kwargs = mock_questionary.select.call_args.kwargs
        assert kwargs["use_search_filter"] is True
        assert kwargs["use_jk_keys"] is False
        choices = kwargs["choices"]
        assert choices[0].title == "deploy - Deploy a service"
        assert choices[1].disabled == "nothing to run"

    def test_descriptions_hidden(self, output, mock_questionary):
        """Descriptions are left out when configured."""
        _answers(mock_questionary.select, 0)
        renderer = PromptRenderer(TUIConfig(show_description=False), console=make_console(None, file=output))

        renderer.render_menu("Pick", ENTRIES)

        assert mock_questionary.select.call_args.kwargs["choices"][0].title == "deploy"

    def test_cancel(self, renderer, mock_questionary):
        """Ctrl+C or ESC gives no choice."""
        _answers(mock_questionary.select, error=KeyboardInterrupt)
        assert renderer.render_menu("Pick", ENTRIES) is None

    def test_input_failure(self, renderer, mock_questionary):
        """Broken input is a render error."""
        _answers(mock_questionary.select, error=EOFError())
        with pytest.raises(RenderError):
            renderer.render_menu("Pick", ENTRIES)

    def test_nothing_selectable(self, renderer, mock_questionary):
        """A menu with only disabled entries cannot be answered."""
        with pytest.raises(RenderError):
            renderer.render_menu("Pick", ENTRIES[1:])
        mock_questionary.select.assert_not_called()

    def test_empty_menu_gives_no_choice(self, renderer, mock_questionary, output):
        """An empty menu is reported and answered like a cancel."""
        assert renderer.render_menu("Pick", ()) is None

        mock_questionary.select.assert_not_called()
        assert "No matches in Pick" in output.getvalue()

    def test_escape_binding_added(self, renderer, mock_questionary):
        """Each question gets the ESC binding merged in."""
        question = _answers(mock_questionary.select, 0)

        renderer.render_menu("Pick", ENTRIES)

        assert question.application.key_bindings is not None


class TestRenderForm:
    """Test forms as a sequence of questions."""

    SPECS = [
        ParameterSpec(name="force", type=ParameterType.BOOL, current_value="false"),
        ParameterSpec(
            name="env",
            type=ParameterType.ENUM,
            current_value="dev",
            options=(ParameterOption("dev"), ParameterOption("prod")),
        ),
        ParameterSpec(name="replicas", type=ParameterType.INT, current_value="1", source_scope="deploy"),
    ]

    def test_answers_collected(self, renderer, mock_questionary, output):
        """Each question type answers its parameter; booleans become literals."""
        _answers(mock_questionary.confirm, True)
        _answers(mock_questionary.select, "prod")
        _answers(mock_questionary.text, "3")

        values = renderer.render_form("Configure: ship deploy", self.SPECS)

        assert values == {"force": "true", "env": "prod", "replicas": "3"}
        assert "Configure: ship deploy" in output.getvalue()
        assert mock_questionary.text.call_args.args[0] == "replicas (from deploy):"

    def test_text_validation(self, renderer, mock_questionary):
        """Text questions validate with the parameter's rules."""
        _answers(mock_questionary.text, "3")

        renderer.render_form("Configure", self.SPECS[2:])

        validate = mock_questionary.text.call_args.kwargs["validate"]
        assert validate("7") is True
        assert "Invalid 'replicas'" in validate("seven")

    def test_optional_enum_offers_unset(self, renderer, mock_questionary):
        """Optional enums can be left unset."""
        _answers(mock_questionary.select, "")

        values = renderer.render_form("Configure", self.SPECS[1:2])

        choices = mock_questionary.select.call_args.kwargs["choices"]
        assert [choice.value for choice in choices] == ["", "dev", "prod"]
        assert values == {"env": ""}

    def test_cancel(self, renderer, mock_questionary):
        """Cancelling any question cancels the form."""
        _answers(mock_questionary.confirm, error=KeyboardInterrupt)
        assert renderer.render_form("Configure", self.SPECS) is None
        mock_questionary.text.assert_not_called()


class TestRenderConfirmation:
    """Test the yes/no confirmation."""

    def test_message_printed(self, renderer, mock_questionary, output):
        """The preview is printed before asking."""
        _answers(mock_questionary.confirm, False)

        assert renderer.render_confirmation("Confirm Execution", "Command to execute:\n\n  app [x]") is False
        assert "app [x]" in output.getvalue()

    def test_cancel(self, renderer, mock_questionary):
        """ESC gives no answer."""
        _answers(mock_questionary.confirm, error=KeyboardInterrupt)
        assert renderer.render_confirmation("Confirm", "go?") is None

    def test_cleanup(self, renderer):
        """cleanup has nothing to release."""
        assert renderer.cleanup() is None


def test_default_console():
    """Without a console the renderer makes a themed one."""
    renderer = PromptRenderer(TUIConfig(theme="light"))
    assert renderer.theme.name == "light"
    assert isinstance(renderer.console, type(make_console()))
