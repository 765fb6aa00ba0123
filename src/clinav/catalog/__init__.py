"""Command catalog.

An immutable, arena-indexed tree of commands built from any
:class:`CommandDefinition` source, plus parameter collection along a
command's scope chain.
"""

from clinav.catalog.builder import Catalog, build_tree, flatten
from clinav.catalog.click_source import Duration, from_click
from clinav.catalog.parameters import ApplyResult, ParameterAssignment, apply, build_argv, collect, command_line
from clinav.catalog.types import (
    CommandDefinition,
    CommandNode,
    FlatEntry,
    MenuEntry,
    ParameterDefinition,
    ParameterOption,
    ParameterSpec,
    ParameterType,
    StaticCommand,
)

__all__ = [
    "ApplyResult",
    "Catalog",
    "CommandDefinition",
    "CommandNode",
    "Duration",
    "FlatEntry",
    "MenuEntry",
    "ParameterAssignment",
    "ParameterDefinition",
    "ParameterOption",
    "ParameterSpec",
    "ParameterType",
    "StaticCommand",
    "apply",
    "build_argv",
    "build_tree",
    "collect",
    "command_line",
    "flatten",
    "from_click",
]
