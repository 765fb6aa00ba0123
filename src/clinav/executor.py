"""Hand a finished session to the click command it was built from."""

import click
from rich.markup import escape

from clinav.catalog.builder import Catalog
from clinav.catalog.parameters import build_argv
from clinav.engine.controller import SessionResult
from clinav.utils.logger import get_logger

logger = get_logger("executor")


class ClickExecutor:
    """Invoke a click command tree in-process with the arguments a session resolved.

    :param command: Root click command the catalog was built from
    :param catalog: Catalog built from ``command``
    :param prog_name: Program name shown in click's messages; the root name by default

    Examples::

        catalog = build_tree(from_click(cli))
        result = Controller(catalog, TerminalRenderer()).run()
        ClickExecutor(cli, catalog).execute(result)
    """

    def __init__(self, command: click.Command, catalog: Catalog, prog_name: str | None = None):
        self.command = command
        self.catalog = catalog
        self.prog_name = prog_name or catalog.root.name

    def argv(self, result: SessionResult) -> list[str]:
        """Arguments for ``result``, without the program name."""
        if result.node is None:
            return []
        return build_argv(self.catalog, result.node, result.assignments)

    def execute(self, result: SessionResult):
        """Run the chosen command if the session was confirmed.

        Click exceptions (usage errors, aborts) propagate to the caller.

        :return: The command callback's return value, or ``None`` when nothing ran
        """
        if not result.should_execute:
            logger.info("Nothing to execute")
            return None
        argv = self.argv(result)
        logger.key_info(f"Executing: {escape(result.command_line)}")
        return self.command.main(args=argv, prog_name=self.prog_name, standalone_mode=False)
