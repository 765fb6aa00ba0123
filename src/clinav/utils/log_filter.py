r"""Log suppression while a session owns the terminal.

Log lines written while a full-screen prompt is drawn corrupt the display, so
the terminal renderer quiets the ``clinav`` loggers for the duration of each
prompt and restores them afterwards. Warnings and errors still get through.

Filters match a logger *and its descendants*: a filter for ``clinav`` also
applies to ``clinav.controller`` and ``clinav.catalog``.

Examples:
    Quiet the whole engine while prompting::

        >>> with quiet_logger("clinav"):
        ...     app.run()

    Hide only catalog build chatter::

        >>> with suppress_logger("clinav.catalog", message_patterns=[r"Built catalog"]):
        ...     build_tree(definition)

.. seealso::
   :class:`LoggerFilter` : Filtering by logger, level and message
   :func:`quiet_logger` : Level-based suppression used by the terminal renderer
"""

import logging
import re
from contextlib import contextmanager
from re import Pattern


def _matches_logger(record_name: str, names: set[str]) -> bool:
    return any(record_name == name or record_name.startswith(f"{name}.") for name in names)


class LoggerFilter(logging.Filter):
    """Suppress records by logger name, level and message pattern.

    All given criteria must match for a record to be suppressed. With
    ``invert=True`` only matching records are kept instead.

    Attributes:
        logger_names: Logger names (with descendants) this filter applies to
        message_patterns: Compiled patterns searched in the formatted message
        levels: Levels this filter applies to
        invert: Keep only matches instead of suppressing them
    """

    def __init__(
        self,
        logger_names: list[str] | None = None,
        message_patterns: list[str] | None = None,
        levels: list[int] | None = None,
        invert: bool = False,
        name: str = "",
    ):
        """
        Args:
            logger_names: Loggers to filter; all loggers when empty
            message_patterns: Regexes matched against ``record.getMessage()``
            levels: Levels to filter; all levels when empty
            invert: Keep only matching records
            name: Passed to :class:`logging.Filter`
        """
        super().__init__(name=name)
        self.logger_names: set[str] = set(logger_names or [])
        self.message_patterns: list[Pattern] = [re.compile(pattern) for pattern in (message_patterns or [])]
        self.levels: set[int] = set(levels or [])
        self.invert = invert

    def filter(self, record: logging.LogRecord) -> bool:
        """Return ``True`` to keep the record."""
        if self.logger_names and not _matches_logger(record.name, self.logger_names):
            return True
        if self.levels and record.levelno not in self.levels:
            return True

        if self.message_patterns:
            message = record.getMessage()
            matches = any(pattern.search(message) for pattern in self.message_patterns)
            return matches if self.invert else not matches

        # No patterns: every record of the selected loggers and levels
        return self.invert

    def __repr__(self) -> str:
        parts = []
        if self.logger_names:
            parts.append(f"loggers={sorted(self.logger_names)}")
        if self.levels:
            parts.append(f"levels={[logging.getLevelName(level) for level in sorted(self.levels)]}")
        if self.message_patterns:
            parts.append(f"patterns={[p.pattern for p in self.message_patterns]}")
        if self.invert:
            parts.append("inverted=True")
        return f"LoggerFilter({', '.join(parts) if parts else 'no criteria'})"


@contextmanager
def suppress_logger(
    logger_name: str | list[str],
    levels: list[int] | None = None,
    message_patterns: list[str] | None = None,
):
    """Temporarily install a :class:`LoggerFilter` on the handlers of the given loggers.

    Filters on a logger do not see records propagated from its children, so
    the filter goes on the handlers instead, covering the whole subtree.

    Yields:
        The installed filter
    """
    logger_names = [logger_name] if isinstance(logger_name, str) else logger_name
    log_filter = LoggerFilter(logger_names=logger_names, levels=levels, message_patterns=message_patterns)

    handlers = []
    for name in logger_names:
        logger = logging.getLogger(name)
        targets = logger.handlers or logging.getLogger().handlers
        handlers.extend(handler for handler in targets if handler not in handlers)
    for handler in handlers:
        handler.addFilter(log_filter)

    try:
        yield log_filter
    finally:
        for handler in handlers:
            handler.removeFilter(log_filter)


@contextmanager
def suppress_logger_level(logger_name: str | list[str], level: int):
    """Temporarily raise the level of the given loggers.

    Yields:
        Mapping of logger name to its original level
    """
    logger_names = [logger_name] if isinstance(logger_name, str) else logger_name
    loggers = {name: logging.getLogger(name) for name in logger_names}
    original_levels = {name: logger.level for name, logger in loggers.items()}

    for logger in loggers.values():
        logger.setLevel(level)
    try:
        yield original_levels
    finally:
        for name, logger in loggers.items():
            logger.setLevel(original_levels[name])


@contextmanager
def quiet_logger(logger_name: str | list[str]):
    """Suppress DEBUG and INFO from the given loggers; WARNING and above still show."""
    with suppress_logger_level(logger_name, logging.WARNING) as levels:
        yield levels


__all__ = [
    "LoggerFilter",
    "suppress_logger",
    "suppress_logger_level",
    "quiet_logger",
]
