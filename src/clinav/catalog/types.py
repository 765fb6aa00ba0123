"""
Type Definitions for the Command Catalog

This module defines the data model shared by the catalog builder, the
parameter collector and the interaction engine.

Architecture:
    - CommandDefinition: Protocol for the host's read-only command tree
    - StaticCommand / ParameterDefinition: plain records implementing it
    - CommandNode: immutable arena node, referenced by integer index
    - FlatEntry: one runnable node with its display path
    - MenuEntry: ephemeral row shown by a menu
    - ParameterSpec: a configurable parameter as presented to the form engine

Everything the engine produces from a definition is frozen, so a built
catalog can be shared between concurrent sessions without locking.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from clinav.catalog.values import convert_builtin
from clinav.errors import ValidationError


class ParameterType(Enum):
    """Value types understood by the form engine.

    Types:
        STRING: Free text
        BOOL: Flips between the literals ``"true"`` and ``"false"``
        INT: Base-10 integer
        DURATION: Compact duration such as ``30s`` or ``1h30m``
        ENUM: One of a fixed list of options
    """

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    DURATION = "duration"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterOption:
    """One allowed value of an enum parameter."""

    value: str
    label: str = ""

    @property
    def display(self) -> str:
        return self.label or self.value


@dataclass(frozen=True)
class ParameterDefinition:
    """A parameter as declared by the host's command definition.

    :param name: Long name, used as identity within a scope (``"dry-run"``)
    :param short_name: Optional one-letter alias (``"n"``)
    :param usage: Help text shown next to the parameter
    :param default_value: Default, already in string form
    :param type: Value type
    :param validator: Optional setter; receives the raw string and returns the
        converted value, raising :class:`ValidationError` or ``ValueError``
        to reject it
    :param options: Allowed values for enum parameters
    :param required: Whether an empty value is refused
    :param positional: Rendered as a positional argument rather than an option
    :param negative_name: Name of the negating flag for booleans (``"no-color"``)
    :param multiple: Value holds several shell-quoted items
    """

    name: str
    short_name: str = ""
    usage: str = ""
    default_value: str = ""
    type: ParameterType = ParameterType.STRING
    validator: Callable[[str], Any] | None = field(default=None, compare=False)
    options: tuple[ParameterOption, ...] = ()
    required: bool = False
    positional: bool = False
    negative_name: str | None = None
    multiple: bool = False

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)

    def convert(self, raw: str) -> Any:
        """Convert a raw string into this parameter's value.

        :raises ValidationError: If the value is rejected
        """
        if self.validator is None:
            return convert_builtin(self.type, raw, self.option_values, self.name, self.multiple)
        try:
            return self.validator(raw)
        except ValidationError:
            raise
        except (ValueError, TypeError) as exc:
            raise ValidationError(f"Invalid '{self.name}': {exc}", parameter=self.name) from exc


@runtime_checkable
class CommandDefinition(Protocol):
    """Read-only view of one node of the host's command tree."""

    @property
    def name(self) -> str: ...

    @property
    def usage(self) -> str: ...

    @property
    def short_description(self) -> str: ...

    @property
    def long_description(self) -> str: ...

    @property
    def children(self) -> Sequence["CommandDefinition"]: ...

    @property
    def runnable(self) -> bool: ...

    @property
    def parameters(self) -> Sequence[ParameterDefinition]: ...


@dataclass(eq=False)
class StaticCommand:
    """Plain command definition for hosts without an argument parser.

    Examples:
        Building a small catalog by hand::

            root = StaticCommand(
                "app",
                children=[
                    StaticCommand("status", short_description="Show status", runnable=True),
                    StaticCommand(
                        "db",
                        children=[StaticCommand("migrate", runnable=True)],
                    ),
                ],
            )
    """

    name: str
    short_description: str = ""
    long_description: str = ""
    usage: str = ""
    children: list["StaticCommand"] = field(default_factory=list)
    runnable: bool = False
    parameters: list[ParameterDefinition] = field(default_factory=list)


@dataclass(frozen=True)
class CommandNode:
    """Immutable catalog node stored in a :class:`~clinav.catalog.builder.Catalog` arena.

    Nodes never hold references to each other; ``children`` and ``parent`` are
    arena indexes.
    """

    index: int
    id: str
    name: str
    usage: str
    short_description: str
    long_description: str
    children: tuple[int, ...]
    parent: int | None
    runnable: bool
    parameters: tuple[ParameterDefinition, ...]
    depth: int

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class FlatEntry:
    """A runnable node in flattened order."""

    index: int
    id: str
    display_path: str
    short_description: str


def _empty_metadata() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class MenuEntry:
    """One row of a menu. Disabled rows stay visible but cannot be selected."""

    id: str
    label: str
    description: str = ""
    disabled: bool = False
    metadata: Mapping[str, Any] = field(default_factory=_empty_metadata, compare=False)


@dataclass(frozen=True)
class ParameterSpec:
    """A configurable parameter as shown by the form engine.

    Produced by :func:`clinav.catalog.parameters.collect`; ``source_scope`` is
    the name of the node that declared it.
    ``multiple`` values hold shell-quoted items; each item is type-checked.
    """

    name: str
    short_name: str = ""
    description: str = ""
    default_value: str = ""
    current_value: str = ""
    required: bool = False
    type: ParameterType = ParameterType.STRING
    source_scope: str = ""
    options: tuple[ParameterOption, ...] = ()
    validator: Callable[[str], Any] | None = field(default=None, compare=False)
    positional: bool = False
    multiple: bool = False

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)

    def validate(self, value: str) -> None:
        """Check a candidate value.

        An empty value is accepted for optional parameters and means "unset".

        :raises ValidationError: If the value is rejected
        """
        if value == "":
            if self.required:
                raise ValidationError(f"'{self.name}' is required", parameter=self.name)
            return
        convert_builtin(self.type, value, self.option_values, self.name, self.multiple)
        if self.validator is None:
            return
        try:
            self.validator(value)
        except ValidationError:
            raise
        except (ValueError, TypeError) as exc:
            raise ValidationError(f"Invalid '{self.name}': {exc}", parameter=self.name) from exc
