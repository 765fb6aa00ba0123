"""clinav - pick a command and its parameters interactively.

Builds an immutable catalog from a command tree (click applications out of
the box), lets the operator choose a command by browsing or searching, edit
its parameters in a form, confirm, and hands the result back to the host.

This package contains:
- catalog: Catalog builder, parameter collector, click adapter
- engine: Navigator, menu, form and confirmation state machines, controller
- interfaces: Terminal (prompt_toolkit + rich) and questionary renderers
- cli: The ``clinav`` command and color themes
"""

# Version information
__version__ = "0.3.0"

__all__ = ["__version__"]

# Import submodules directly, e.g. ``from clinav.engine import Controller``
