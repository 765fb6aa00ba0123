"""Read-only views of a catalog for ``clinav tree`` and host debugging.

Both views use the style names of :func:`clinav.cli.styles.build_rich_theme`,
so print them on a console made by :func:`clinav.cli.styles.make_console`.
"""

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from clinav.catalog.builder import Catalog, flatten
from clinav.catalog.types import CommandNode, ParameterDefinition, ParameterType

RUNNABLE_MARK = "✓"


def parameter_label(definition: ParameterDefinition) -> str:
    """How a parameter is typed on the command line: ``-o, --output`` or ``NAME``."""
    if definition.positional:
        label = definition.name.upper()
        return f"{label}..." if definition.multiple else label
    names = [f"--{definition.name}"]
    if definition.short_name:
        names.insert(0, f"-{definition.short_name}")
    if definition.negative_name:
        names.append(f"--{definition.negative_name}")
    return ", ".join(names)


def _parameter_summary(definition: ParameterDefinition) -> str:
    summary = parameter_label(definition)
    if definition.type is not ParameterType.BOOL:
        summary += f" <{definition.type.value}>"
    if definition.required:
        summary += " (required)"
    return summary


def _node_label(node: CommandNode, show_descriptions: bool) -> str:
    label = f"[primary]{escape(node.name)}[/primary]"
    if node.runnable:
        label += f" [success]{RUNNABLE_MARK}[/success]"
    if show_descriptions and node.short_description:
        label += f" [secondary]- {escape(node.short_description)}[/secondary]"
    return label


def render_tree(catalog: Catalog, show_descriptions: bool = True, show_parameters: bool = False) -> Tree:
    """The catalog as a rich tree; runnable commands carry a ``✓``.

    Examples::

        console = make_console(get_theme("nord"))
        console.print(render_tree(build_tree(from_click(cli))))
    """
    title = f"[header]Command Tree ({catalog.runnable_count} commands)[/header]"
    tree = Tree(title, guide_style="border")

    def add(branch: Tree, node: CommandNode) -> None:
        child_branch = branch.add(_node_label(node, show_descriptions))
        if show_parameters:
            for definition in node.parameters:
                child_branch.add(f"[dim]{escape(_parameter_summary(definition))}[/dim]")
        for child in catalog.children(node.index):
            add(child_branch, child)

    add(tree, catalog.root)
    return tree


def render_flat(catalog: Catalog, show_descriptions: bool = True, show_parameters: bool = False) -> Table:
    """Runnable commands as a numbered table, in menu order."""
    entries = flatten(catalog)
    table = Table(
        title=f"Command Tree ({len(entries)} commands)",
        title_style="header",
        show_header=True,
        header_style="primary",
        border_style="border",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Command", style="command", no_wrap=True)
    if show_descriptions:
        table.add_column("Description", style="secondary")
    if show_parameters:
        table.add_column("Parameters", style="dim")

    for number, entry in enumerate(entries, start=1):
        row = [str(number), escape(entry.display_path)]
        if show_descriptions:
            row.append(escape(entry.short_description))
        if show_parameters:
            definitions = catalog.node(entry.index).parameters
            row.append(escape("\n".join(_parameter_summary(definition) for definition in definitions)))
        table.add_row(*row)
    return table
