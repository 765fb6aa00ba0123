"""
Catalog Builder - Mirror a command definition tree into an immutable arena

The builder walks the host's :class:`~clinav.catalog.types.CommandDefinition`
tree once and stores every node in a contiguous tuple. Nodes reference their
parent and children by integer index, so traversals never allocate wrappers
and a node's identity is simply its position in the arena.

Key Functions:
    - :func:`build_tree`: validate and mirror a definition tree
    - :func:`flatten`: list runnable nodes in depth-first pre-order

Examples:
    Build and flatten a catalog::

        >>> catalog = build_tree(root_definition)
        >>> [entry.display_path for entry in flatten(catalog)]
        ['a', 'b c', 'b d']
"""

from collections.abc import Iterator, Sequence

from clinav.catalog.types import CommandDefinition, CommandNode, FlatEntry
from clinav.errors import StructuralError
from clinav.utils.logger import get_logger

logger = get_logger("catalog")


class Catalog:
    """Read-only arena of :class:`CommandNode` objects.

    Index ``0`` is always the session root. The arena is never mutated after
    construction, so a single catalog may back any number of sessions.
    """

    ROOT = 0

    def __init__(self, nodes: Sequence[CommandNode]):
        if not nodes:
            raise StructuralError("A catalog needs at least a root command")
        self._nodes: tuple[CommandNode, ...] = tuple(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[CommandNode]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"Catalog(root={self.root.name!r}, nodes={len(self._nodes)})"

    @property
    def root(self) -> CommandNode:
        return self._nodes[self.ROOT]

    @property
    def runnable_count(self) -> int:
        return sum(1 for node in self._nodes if node.runnable)

    def node(self, index: int) -> CommandNode:
        return self._nodes[index]

    def children(self, index: int) -> tuple[CommandNode, ...]:
        return tuple(self._nodes[child] for child in self._nodes[index].children)

    def ancestors(self, index: int) -> list[CommandNode]:
        """Return the scope chain of a node: the node itself, then each parent up to the root."""
        chain = []
        current: int | None = index
        while current is not None:
            node = self._nodes[current]
            chain.append(node)
            current = node.parent
        return chain

    def path_names(self, index: int) -> tuple[str, ...]:
        """Names from the first level below the root down to ``index``."""
        chain = self.ancestors(index)
        return tuple(node.name for node in reversed(chain[:-1]))

    def full_path(self, index: int) -> str:
        """Space-joined names including the root, as typed on a command line."""
        return " ".join(node.name for node in reversed(self.ancestors(index)))

    def find(self, path: Sequence[str]) -> CommandNode | None:
        """Look a node up by its names below the root.

        An empty path returns the root.
        """
        current = self.root
        for name in path:
            match = next((child for child in self.children(current.index) if child.name == name), None)
            if match is None:
                return None
            current = match
        return current


class _TreeBuilder:
    """Depth-first mirror of a definition tree with cycle detection."""

    def __init__(self):
        self._nodes: list[CommandNode | None] = []
        # Definitions on the current DFS path, keyed by object identity
        self._active: set[int] = set()

    def build(self, definition: CommandDefinition) -> Catalog:
        self._visit(definition, parent=None, depth=0, names=())
        return Catalog(self._nodes)

    def _visit(
        self,
        definition: CommandDefinition,
        parent: int | None,
        depth: int,
        names: tuple[str, ...],
    ) -> int:
        key = id(definition)
        if key in self._active:
            trail = " -> ".join(names + (definition.name,))
            raise StructuralError(
                f"Command '{definition.name}' is its own descendant ({trail})",
                suggestion="Command definitions must form a tree",
            )

        name = definition.name
        if not name or not name.strip():
            location = " ".join(names) or "<root>"
            raise StructuralError(f"Command under '{location}' has an empty name")

        self._active.add(key)
        try:
            index = len(self._nodes)
            self._nodes.append(None)

            parameters = tuple(definition.parameters)
            seen_parameters: set[str] = set()
            for parameter in parameters:
                if parameter.name in seen_parameters:
                    raise StructuralError(
                        f"Command '{name}' declares parameter '{parameter.name}' twice"
                    )
                seen_parameters.add(parameter.name)

            path = names + (name,)
            child_indexes = []
            seen_children: set[str] = set()
            for child in definition.children:
                if child.name in seen_children:
                    raise StructuralError(f"Command '{name}' has two children named '{child.name}'")
                seen_children.add(child.name)
                child_indexes.append(self._visit(child, index, depth + 1, path))

            self._nodes[index] = CommandNode(
                index=index,
                id=" ".join(path[1:]) if parent is not None else name,
                name=name,
                usage=definition.usage or "",
                short_description=definition.short_description or "",
                long_description=definition.long_description or "",
                children=tuple(child_indexes),
                parent=parent,
                runnable=bool(definition.runnable),
                parameters=parameters,
                depth=depth,
            )
        finally:
            self._active.discard(key)

        return index


def build_tree(definition: CommandDefinition) -> Catalog:
    """Mirror a command definition tree into a :class:`Catalog`.

    The walk is deterministic and has no side effects on the definition.

    :param definition: Root of the host's command tree
    :return: Immutable catalog whose node ``0`` is the root
    :raises StructuralError: If the definition is cyclic, has an empty name,
        duplicate sibling names, or a scope declaring a parameter twice
    """
    catalog = _TreeBuilder().build(definition)
    logger.debug(f"Built catalog '{catalog.root.name}' with {len(catalog)} commands ({catalog.runnable_count} runnable)")
    return catalog


def flatten(catalog: Catalog) -> list[FlatEntry]:
    """List every runnable node in depth-first pre-order.

    A node is included iff it is runnable; groups that only contain runnable
    descendants are skipped. The display path omits the root name, except for
    a runnable root, which is shown as its own name.
    """
    entries = []
    stack = [Catalog.ROOT]
    while stack:
        node = catalog.node(stack.pop())
        if node.runnable:
            entries.append(
                FlatEntry(
                    index=node.index,
                    id=node.id,
                    display_path=" ".join(catalog.path_names(node.index)) or node.name,
                    short_description=node.short_description,
                )
            )
        stack.extend(reversed(node.children))
    return entries
