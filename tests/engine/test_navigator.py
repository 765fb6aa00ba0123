"""Tests for the navigator state machine."""

import pytest

from clinav.catalog.builder import build_tree
from clinav.catalog.types import StaticCommand
from clinav.engine.events import CancelEvent
from clinav.engine.loop import Action
from clinav.engine.navigator import MenuCancelled, MenuChoice, NavigationMode, NavigationState, Navigator
from clinav.errors import RenderError


def _walk(navigator, *choices):
    state = navigator.initial_state()
    action = None
    for choice in choices:
        event = MenuCancelled() if choice is None else MenuChoice(choice)
        state, action = navigator.handle_event(state, event)
    return state, action


class TestTreeNavigation:
    """Test descending level by level."""

    def test_root_menu(self, sample_catalog):
        """The first menu lists the root's children."""
        request = Navigator(sample_catalog).menu(NavigationState())

        assert request.title == "Select a command"
        assert [entry.label for entry in request.entries] == ["a", "b"]
        assert [entry.metadata["group"] for entry in request.entries] == [False, True]

    def test_descend_into_group(self, sample_catalog):
        """Choosing a group shows its children next."""
        navigator = Navigator(sample_catalog)
        state, action = _walk(navigator, 1)

        assert action is None
        assert state.level == 1
        request = navigator.menu(state)
        assert request.title == "Select a command: app b"
        assert [entry.label for entry in request.entries] == ["c", "d"]

    def test_select_leaf(self, sample_catalog):
        """Choosing a runnable leaf finishes the walk."""
        navigator = Navigator(sample_catalog)
        state, action = _walk(navigator, 1, 1)

        assert action is Action.QUIT
        assert state.mode is NavigationMode.LEAF_SELECTED
        assert navigator.selected_path(state) == ("b", "d")

    def test_select_top_level_leaf(self, sample_catalog):
        """A leaf directly under the root is selected in one step."""
        navigator = Navigator(sample_catalog)
        state, _ = _walk(navigator, 0)
        assert navigator.selected_path(state) == ("a",)

    def test_cancel_discards_path(self, sample_catalog):
        """Cancelling at any depth leaves no selection behind."""
        navigator = Navigator(sample_catalog)
        state, action = _walk(navigator, 1, None)

        assert action is Action.QUIT
        assert state.mode is NavigationMode.CANCELLED
        assert state.path == ()
        assert navigator.selected_path(state) == ()

    def test_cancel_event(self, sample_catalog):
        """A host cancel behaves like a cancelled menu."""
        state, action = Navigator(sample_catalog).handle_event(NavigationState(), CancelEvent())
        assert state.mode is NavigationMode.CANCELLED
        assert action is Action.QUIT

    def test_invalid_choice(self, sample_catalog):
        """A renderer answering outside the menu is an error."""
        with pytest.raises(RenderError):
            Navigator(sample_catalog).handle_event(NavigationState(), MenuChoice(5))

    def test_disabled_choice_ignored(self):
        """A group with nothing to run cannot be chosen."""
        catalog = build_tree(StaticCommand("app", children=[StaticCommand("empty"), StaticCommand("go", runnable=True)]))
        navigator = Navigator(catalog)

        assert navigator.entries(NavigationState())[0].disabled
        state, action = navigator.handle_event(NavigationState(), MenuChoice(0))

        assert state == NavigationState()
        assert action is None

    def test_finished_state_stays_finished(self, sample_catalog):
        """Further events after the walk ended change nothing."""
        navigator = Navigator(sample_catalog)
        state, _ = _walk(navigator, 0)

        assert navigator.initialize(state) is Action.QUIT
        assert navigator.handle_event(state, MenuChoice(1)) == (state, Action.QUIT)


class TestRunnableGroups:
    """Test nodes that run by themselves and also have children."""

    @pytest.fixture
    def catalog(self):
        return build_tree(
            StaticCommand(
                "tool",
                runnable=True,
                children=[
                    StaticCommand("logs", runnable=True, children=[StaticCommand("tail", runnable=True)]),
                ],
            )
        )

    def test_runnable_root_offered(self, catalog):
        """A runnable root gets a run entry in the first menu."""
        labels = [entry.label for entry in Navigator(catalog).entries(NavigationState())]
        assert labels == ["[run] tool", "logs"]

    def test_select_runnable_root(self, catalog):
        """Choosing the run entry selects the root itself."""
        navigator = Navigator(catalog)
        state, action = _walk(navigator, 0)

        assert action is Action.QUIT
        assert state.selected == 0
        assert navigator.selected_path(state) == ()

    def test_runnable_group_descends_then_runs(self, catalog):
        """A runnable group is entered; its own run entry selects it."""
        navigator = Navigator(catalog)
        state, _ = _walk(navigator, 1)

        assert [entry.label for entry in navigator.entries(state)] == ["[run] logs", "tail"]
        state, _ = navigator.handle_event(state, MenuChoice(0))
        assert navigator.selected_path(state) == ("logs",)


class TestFlatNavigation:
    """Test the single flattened menu."""

    def test_flat_entries(self, sample_catalog):
        """All runnable commands are offered at once by display path."""
        request = Navigator(sample_catalog, flat=True).menu(NavigationState())

        assert request.title == "Select a command"
        assert [entry.label for entry in request.entries] == ["a", "b c", "b d"]
        assert [entry.description for entry in request.entries] == ["Leaf A", "Leaf C", "Leaf D"]

    def test_flat_select(self, sample_catalog):
        """One choice finishes the walk."""
        navigator = Navigator(sample_catalog, flat=True)
        state, action = _walk(navigator, 2)

        assert action is Action.QUIT
        assert navigator.selected_path(state) == ("b", "d")


class TestRender:
    """Test the breadcrumb frame."""

    def test_breadcrumbs(self, sample_catalog):
        """The frame names the current position or outcome."""
        navigator = Navigator(sample_catalog)

        assert navigator.render(NavigationState()).plain_lines() == ["app"]
        state, _ = _walk(navigator, 1)
        assert navigator.render(state).plain_lines() == ["app b"]
        state, _ = _walk(navigator, 1, 0)
        assert navigator.render(state).plain_lines() == ["Selected: app b c"]
        state, _ = _walk(navigator, None)
        assert navigator.render(state).plain_lines() == ["Cancelled"]
