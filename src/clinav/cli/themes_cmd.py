"""Preview the color themes.

This module provides the 'clinav themes' command: color swatches for each
theme plus a sample menu drawn exactly as the terminal renderer draws it.
"""

import click
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from clinav.catalog.types import MenuEntry
from clinav.cli.styles import THEMES, ColorTheme, Styles, get_theme, make_console
from clinav.engine.events import KeyEvent, Keys, Viewport
from clinav.engine.menu import MenuMachine, MenuState
from clinav.interfaces.tui.frames import frame_renderable

SAMPLE_ENTRIES = (
    MenuEntry(id="deploy", label="deploy", description="Deploy a service"),
    MenuEntry(id="db", label="db", description="Database maintenance", metadata={"group": True}),
    MenuEntry(id="status", label="status", description="Show service status"),
    MenuEntry(id="legacy", label="legacy", description="Nothing to run here", disabled=True),
)


def sample_frame(theme: ColorTheme, width: int = 60):
    """A sample menu, cursor on the second entry, as rendered with ``theme``."""
    state = MenuState.create("Select a command", SAMPLE_ENTRIES, Viewport(width=width, height=12))
    state, _ = MenuMachine().handle_event(state, KeyEvent(Keys.DOWN))
    return frame_renderable(MenuMachine().render(state), theme)


def swatches(theme: ColorTheme) -> Table:
    """Swatches of the theme's colors."""
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("Color", style="bold", width=12)
    table.add_column("Hex", width=9)
    table.add_column("Swatch", width=6)
    table.add_column("Usage", style=Styles.DIM)

    colors = [
        ("primary", theme.primary, "Titles, cursor, highlights"),
        ("secondary", theme.secondary, "Descriptions"),
        ("success", theme.success, "Parameter values"),
        ("warning", theme.warning, "Search query, edit buffer"),
        ("error", theme.error, "Validation errors"),
        ("muted", theme.muted, "Disabled entries, key hints"),
    ]
    for name, hex_value, usage in colors:
        table.add_row(name, hex_value, Text("████", style=hex_value), usage)
    return table


@click.command()
@click.argument("name", required=False, type=click.Choice(list(THEMES), case_sensitive=False))
def themes(name):
    """Preview one theme, or all of them.

    Examples:

    \b
      clinav themes
      clinav themes nord
    """
    selected = [get_theme(name)] if name else list(THEMES.values())
    for theme in selected:
        console = make_console(theme)
        console.print()
        console.print(
            Panel.fit(f"[bold]THEME: {theme.name.upper()}[/bold]", border_style=Styles.BORDER),
        )
        console.print(swatches(theme))
        console.print()
        console.print(sample_frame(theme))
