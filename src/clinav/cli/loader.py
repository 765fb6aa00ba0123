"""Load a click command from a ``module:attribute`` reference."""

import importlib
import os
import sys

import click

from clinav.errors import ConfigurationError


def load_command(reference: str) -> click.Command:
    """Import ``package.module:attribute`` and return the click command it names.

    The attribute may be dotted (``module:app.cli``). The current directory is
    importable, so ``clinav run app:cli`` works next to ``app.py``.

    :raises ConfigurationError: If the reference is malformed, cannot be
        imported, or does not name a click command
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            f"Invalid command reference '{reference}'",
            suggestion="Use the form 'package.module:attribute', e.g. 'myapp.cli:main'",
        )

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_name}': {e}") from e

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ConfigurationError(f"Module '{module_name}' has no attribute '{attribute}'") from None

    if not isinstance(target, click.Command):
        raise ConfigurationError(
            f"'{reference}' is not a click command",
            suggestion="Point at the object created by @click.group() or @click.command()",
        )
    return target


class CommandReference(click.ParamType):
    """Click parameter type resolving ``module:attribute`` to a command."""

    name = "module:attribute"

    def convert(self, value, param, ctx):
        if isinstance(value, click.Command):
            return value
        try:
            return load_command(value)
        except ConfigurationError as e:
            message = e.message if not e.suggestion else f"{e.message}. {e.suggestion}"
            self.fail(message, param, ctx)
