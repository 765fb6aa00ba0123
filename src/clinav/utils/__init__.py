"""Shared utilities.

Modules:
    config: Session configuration, YAML loading and TUI activation rules
    logger: Rich component loggers
    log_filter: Temporary log suppression
"""

from . import config, log_filter, logger

__all__ = ["config", "logger", "log_filter"]
