"""
Pytest configuration and shared test utilities.

This module provides shared fixtures for all clinav tests: small hand-built
command trees, scripted renderers and environment isolation.
"""

import logging

import pytest

from clinav.catalog.builder import build_tree
from clinav.catalog.types import ParameterDefinition, ParameterOption, ParameterType, StaticCommand
from clinav.engine.loop import ScriptedDriver, keys
from clinav.engine.renderer import MachineRenderer
from clinav.utils.config import TUIConfig

# ===================================================================
# Command Tree Factories
# ===================================================================


def make_sample_tree() -> StaticCommand:
    """Root ``app`` with a leaf ``a`` and a group ``b`` holding ``c`` and ``d``."""
    return StaticCommand(
        "app",
        short_description="Sample application",
        children=[
            StaticCommand("a", short_description="Leaf A", runnable=True),
            StaticCommand(
                "b",
                short_description="Group B",
                children=[
                    StaticCommand("c", short_description="Leaf C", runnable=True),
                    StaticCommand("d", short_description="Leaf D", runnable=True),
                ],
            ),
        ],
    )


def make_deploy_tree() -> StaticCommand:
    """A tree whose leaf carries typed parameters and inherits one from the root."""
    return StaticCommand(
        "ship",
        parameters=[
            ParameterDefinition("verbose", short_name="v", type=ParameterType.BOOL, default_value="false"),
        ],
        children=[
            StaticCommand(
                "deploy",
                short_description="Deploy a service",
                runnable=True,
                parameters=[
                    ParameterDefinition(
                        "env",
                        type=ParameterType.ENUM,
                        default_value="dev",
                        options=(ParameterOption("dev"), ParameterOption("prod")),
                    ),
                    ParameterDefinition("replicas", type=ParameterType.INT, default_value="1"),
                    ParameterDefinition("service", positional=True, required=True),
                ],
            ),
            StaticCommand("status", short_description="Show status", runnable=True),
        ],
    )


# ===================================================================
# Fixtures
# ===================================================================


@pytest.fixture
def sample_catalog():
    """Catalog built from :func:`make_sample_tree`."""
    return build_tree(make_sample_tree())


@pytest.fixture
def deploy_catalog():
    """Catalog built from :func:`make_deploy_tree`."""
    return build_tree(make_deploy_tree())


@pytest.fixture
def scripted_renderer():
    """Factory for a machine renderer that replays key names."""

    def factory(*names, config=None, on_frame=None):
        return MachineRenderer(ScriptedDriver(keys(*names), on_frame), config or TUIConfig())

    return factory


@pytest.fixture
def sample_tree():
    """Fresh definition from :func:`make_sample_tree`, for tests that modify it."""
    return make_sample_tree()


@pytest.fixture
def deploy_tree():
    """Fresh definition from :func:`make_deploy_tree`."""
    return make_deploy_tree()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's TUI toggle and config file out of tests."""
    monkeypatch.delenv("CLINAV_TUI", raising=False)
    monkeypatch.delenv("CLINAV_CONFIG", raising=False)


@pytest.fixture
def restore_log_level():
    """Undo level changes made to the clinav logger by a test."""
    package_logger = logging.getLogger("clinav")
    level = package_logger.level
    yield package_logger
    package_logger.setLevel(level)
