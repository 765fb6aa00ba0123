"""Main CLI entry point for clinav.

Subcommands are imported only when invoked, so ``clinav --help`` does not
load prompt_toolkit or the target application.
"""

import importlib
import logging
import sys

import click

from clinav import __version__
from clinav.errors import ClinavError

# Subcommand name -> (module, attribute)
COMMANDS = {
    "run": ("clinav.cli.run_cmd", "run"),
    "tree": ("clinav.cli.tree_cmd", "tree"),
    "themes": ("clinav.cli.themes_cmd", "themes"),
    "demo": ("clinav.cli.demo_cmd", "demo"),
}


class LazyGroup(click.Group):
    """Click group that lazily loads subcommands only when invoked."""

    def get_command(self, ctx, cmd_name):
        """Lazily import and return the command when it's invoked."""
        if cmd_name not in COMMANDS:
            return None
        module_name, attribute = COMMANDS[cmd_name]
        return getattr(importlib.import_module(module_name), attribute)

    def list_commands(self, ctx):
        """Return list of available commands (for --help)."""
        return list(COMMANDS)


@click.group(cls=LazyGroup)
@click.version_option(version=__version__, prog_name="clinav")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose):
    """clinav - choose a command and its parameters interactively.

    Point clinav at any click application to browse or search its commands,
    fill in parameters in a form and run the result.

    Examples:

    \b
      clinav demo                          Try it on the bundled demo app
      clinav run mypkg.cli:app             Pick and run a command of mypkg
      clinav run mypkg.cli:app --flat      One searchable list of commands
      clinav tree mypkg.cli:app --params   Show the command tree
      clinav themes                        Preview color themes
    """
    if verbose:
        logging.getLogger("clinav").setLevel(logging.DEBUG)


def main():
    """Entry point for the clinav CLI."""
    try:
        rv = cli.main(standalone_mode=False)
    except (KeyboardInterrupt, click.Abort):
        click.echo("\nCancelled.", err=True)
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except ClinavError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        if e.suggestion:
            click.echo(e.suggestion, err=True)
        sys.exit(1)
    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)


if __name__ == "__main__":
    main()
