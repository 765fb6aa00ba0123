"""
Parameter Collector - Gather, apply and render parameters along a scope chain

A command's effective parameters are its own plus every ancestor's, with the
closest declaration of a name winning. :func:`collect` builds the
deduplicated list the form engine edits, :func:`apply` converts the edited
strings back through each definition's setter, and :func:`build_argv` turns
the result into argument tokens for an executor.

Names owned by the engine (``help``, ``tui`` and anything starting with
``tui-``) are never offered to the operator.
"""

import shlex
from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from clinav.catalog.builder import Catalog
from clinav.catalog.types import CommandNode, ParameterDefinition, ParameterSpec, ParameterType
from clinav.catalog.values import parse_bool
from clinav.errors import ValidationError
from clinav.utils.logger import get_logger

logger = get_logger("parameters")

RESERVED_NAMES = frozenset({"help", "tui"})
RESERVED_PREFIX = "tui-"


def is_reserved(name: str) -> bool:
    """Whether a parameter name belongs to the engine rather than the catalog."""
    return name in RESERVED_NAMES or name.startswith(RESERVED_PREFIX)


@dataclass(frozen=True)
class ParameterAssignment:
    """A converted value bound to the definition that accepted it.

    :param scope: Arena index of the node declaring the parameter
    :param name: Parameter name
    :param raw: String value as edited in the form
    :param value: Converted value, ``None`` when the raw value was empty
    """

    scope: int
    name: str
    raw: str
    value: Any
    definition: ParameterDefinition = field(compare=False, repr=False)


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of :func:`apply`: every accepted assignment plus every rejection."""

    assignments: tuple[ParameterAssignment, ...] = ()
    errors: tuple[ValidationError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> ValidationError | None:
        """First rejection, in the order values were applied."""
        return self.errors[0] if self.errors else None

    def as_dict(self) -> dict[str, Any]:
        return {assignment.name: assignment.value for assignment in self.assignments}


def collect(catalog: Catalog, index: int) -> list[ParameterSpec]:
    """Assemble the parameters configurable for a node.

    Walks from the node toward the root. Within a scope, parameters keep
    declaration order. A name already seen closer to the node is skipped.

    :param catalog: Built catalog
    :param index: Arena index of the selected node
    :return: Ordered, name-unique parameter specs
    """
    specs = []
    seen: set[str] = set()
    for node in catalog.ancestors(index):
        for definition in node.parameters:
            if definition.name in seen or is_reserved(definition.name):
                continue
            seen.add(definition.name)
            specs.append(
                ParameterSpec(
                    name=definition.name,
                    short_name=definition.short_name,
                    description=definition.usage,
                    default_value=definition.default_value,
                    current_value=definition.default_value,
                    required=definition.required,
                    type=definition.type,
                    source_scope=node.name,
                    options=definition.options,
                    validator=definition.validator,
                    positional=definition.positional,
                    multiple=definition.multiple,
                )
            )
    return specs


def _lookup(chain: Sequence[CommandNode], name: str) -> tuple[CommandNode, ParameterDefinition] | None:
    if is_reserved(name):
        return None
    for node in chain:
        for definition in node.parameters:
            if definition.name == name:
                return node, definition
    return None


def apply(catalog: Catalog, index: int, values: Mapping[str, str]) -> ApplyResult:
    """Convert form values through the definitions that own them.

    Each name resolves to the first matching definition on the same chain
    :func:`collect` walks. Application is best-effort: a rejected value is
    recorded and skipped, the remaining names are still applied. The catalog
    itself is never modified.

    :param catalog: Built catalog
    :param index: Arena index of the selected node
    :param values: Mapping of parameter name to string value
    :return: Accepted assignments and collected rejections
    """
    chain = catalog.ancestors(index)
    assignments = []
    errors = []

    for name, raw in values.items():
        found = _lookup(chain, name)
        if found is None:
            errors.append(ValidationError(f"Unknown parameter '{name}'", parameter=name))
            continue
        node, definition = found

        if raw == "":
            if definition.required:
                errors.append(ValidationError(f"'{name}' is required", parameter=name))
                continue
            value = None
        else:
            try:
                value = definition.convert(raw)
            except ValidationError as exc:
                logger.debug(f"Rejected value for '{name}': {exc}")
                errors.append(exc)
                continue

        assignments.append(
            ParameterAssignment(scope=node.index, name=name, raw=raw, value=value, definition=definition)
        )

    return ApplyResult(assignments=tuple(assignments), errors=tuple(errors))


def _option_flag(name: str) -> str:
    return f"-{name}" if len(name) == 1 else f"--{name}"


def _option_tokens(assignment: ParameterAssignment) -> list[str]:
    definition = assignment.definition
    flag = _option_flag(definition.name)

    if definition.type is ParameterType.BOOL:
        enabled = assignment.value if isinstance(assignment.value, bool) else parse_bool(assignment.raw)
        if enabled:
            return [flag]
        if definition.negative_name:
            return [_option_flag(definition.negative_name)]
        return []

    items = shlex.split(assignment.raw) if definition.multiple else [assignment.raw]
    tokens = []
    for item in items:
        if flag.startswith("--"):
            tokens.append(f"{flag}={item}")
        else:
            tokens.extend([flag, item])
    return tokens


def build_argv(catalog: Catalog, index: int, assignments: Sequence[ParameterAssignment]) -> list[str]:
    """Render a selection as argument tokens, excluding the root name.

    For each scope from the root down: the scope's name, then options whose
    value differs from the default, then positional values.

    Examples::

        >>> build_argv(catalog, deploy.index, result.assignments)
        ['--verbose', 'deploy', '--replicas=3', 'production']
    """
    by_scope: dict[int, list[ParameterAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_scope[assignment.scope].append(assignment)

    argv: list[str] = []
    for node in reversed(catalog.ancestors(index)):
        if not node.is_root:
            argv.append(node.name)

        positionals = []
        for assignment in by_scope.get(node.index, ()):
            definition = assignment.definition
            if definition.name == "help" or assignment.raw == "":
                continue
            if definition.positional:
                positionals.extend(shlex.split(assignment.raw) if definition.multiple else [assignment.raw])
            elif assignment.raw != definition.default_value:
                argv.extend(_option_tokens(assignment))
        argv.extend(positionals)

    return argv


def command_line(catalog: Catalog, index: int, assignments: Sequence[ParameterAssignment]) -> str:
    """Shell-quoted preview of the command a selection resolves to."""
    return shlex.join([catalog.root.name, *build_argv(catalog, index, assignments)])
