"""
Component Logger Framework

Provides colored logging for clinav components with:
- Unified API for all components (catalog, engine, renderers, CLI)
- Rich terminal output with component-specific colors
- Graceful fallbacks when configuration is unavailable

All component loggers live under the ``clinav`` logger, so a host can quiet
the whole engine at once (see :func:`clinav.utils.log_filter.quiet_logger`).
Output goes to stderr, leaving stdout to the commands being launched.

Usage:
    logger = get_logger("controller")
    logger.key_info("Selected command: app deploy")
    logger.info("Loaded 12 commands")
    logger.debug("Detailed trace")
    logger.success("Command finished")
    logger.warning("Something to note")
    logger.error("Something went wrong")

    # Custom loggers with explicit parameters
    logger = get_logger(name="custom_component", color="blue")
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from clinav.errors import ConfigurationError
from clinav.utils.config import get_config_value

ROOT_LOGGER = "clinav"

DEFAULT_COLORS = {
    "catalog": "cyan",
    "parameters": "cyan",
    "controller": "magenta",
    "renderer": "blue",
    "tui": "blue",
    "prompt": "blue",
    "enhance": "green",
    "executor": "green",
    "cli": "white",
}


class ComponentLogger:
    """
    Rich-formatted logger for clinav components with color coding and message hierarchy.

    Message Types:
    - key_info: Important operational information
    - info: Normal operational messages
    - debug: Detailed tracing information
    - warning: Warning messages
    - error: Error messages
    - success: Success messages
    """

    def __init__(self, base_logger: logging.Logger, component_name: str, color: str = "white"):
        """
        Initialize component logger.

        Args:
            base_logger: Underlying Python logger
            component_name: Name of the component (e.g., 'catalog', 'controller')
            color: Rich color name for this component
        """
        self.base_logger = base_logger
        self.component_name = component_name
        self.color = color

    def _format_message(self, message: str, style: str, emoji: str = "") -> str:
        """Format message with Rich markup and emoji prefix."""
        prefix = f"{emoji}{self.component_name.title()}: "
        if style:
            return f"[{style}]{prefix}{message}[/{style}]"
        return f"{prefix}{message}"

    def key_info(self, message: str) -> None:
        """Important operational information."""
        style = f"bold {self.color}" if self.color != "white" else "bold white"
        self.base_logger.info(self._format_message(message, style))

    def info(self, message: str) -> None:
        self.base_logger.info(self._format_message(message, self.color))

    def debug(self, message: str) -> None:
        style = f"dim {self.color}" if self.color != "white" else "dim white"
        self.base_logger.debug(self._format_message(message, style, "🔍 "))

    def warning(self, message: str) -> None:
        self.base_logger.warning(self._format_message(message, "bold yellow", "⚠️  "))

    def error(self, message: str, exc_info: bool = False) -> None:
        self.base_logger.error(self._format_message(message, "bold red", "❌ "), exc_info=exc_info)

    def success(self, message: str) -> None:
        self.base_logger.info(self._format_message(message, "bold green", "✅ "))

    # Compatibility methods - delegate to base logger
    def exception(self, message: str, *args, **kwargs) -> None:
        self.base_logger.exception(self._format_message(message, "bold red", "❌ "), *args, **kwargs)

    def log(self, level: int, message: str, *args, **kwargs) -> None:
        self.base_logger.log(level, message, *args, **kwargs)

    @property
    def level(self) -> int:
        return self.base_logger.level

    @property
    def name(self) -> str:
        return self.base_logger.name

    def setLevel(self, level: int) -> None:
        self.base_logger.setLevel(level)

    def isEnabledFor(self, level: int) -> bool:
        return self.base_logger.isEnabledFor(level)


def _setup_rich_logging(level: int = logging.INFO) -> None:
    """Attach a Rich handler to the ``clinav`` logger (once)."""
    package_logger = logging.getLogger(ROOT_LOGGER)

    for handler in package_logger.handlers:
        if isinstance(handler, RichHandler):
            return

    package_logger.setLevel(level)

    try:
        show_traceback_locals = bool(get_config_value("logging.show_traceback_locals", False))
        show_full_paths = bool(get_config_value("logging.show_full_paths", False))
    except ConfigurationError:
        show_traceback_locals = False
        show_full_paths = False

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=True,  # Enable [bold], [green], etc. in log messages
        show_path=show_full_paths,
        show_time=True,
        show_level=True,
        tracebacks_show_locals=show_traceback_locals,
    )
    package_logger.addHandler(handler)


def get_logger(
    component_name: str | None = None,
    level: int = logging.INFO,
    *,
    name: str | None = None,
    color: str | None = None,
) -> ComponentLogger:
    """
    Get a component logger.

    Args:
        component_name: Component name (e.g., 'catalog', 'controller'); the
            logger is named ``clinav.<component_name>``
        level: Level of the ``clinav`` logger on first setup
        name: Direct logger name for custom loggers (keyword-only)
        color: Direct color specification (keyword-only)

    Returns:
        ComponentLogger instance

    Examples:
        logger = get_logger("catalog")
        logger.info("Built catalog")

        logger = get_logger(name="test_logger", color="blue")
    """
    _setup_rich_logging(level)

    if name is not None:
        return ComponentLogger(logging.getLogger(name), name, color or "white")

    if component_name is None:
        raise ValueError(
            "Component name is required. Usage: get_logger('component_name') or "
            "get_logger(name='custom_name', color='blue')"
        )

    base_logger = logging.getLogger(f"{ROOT_LOGGER}.{component_name}")

    if color is None:
        try:
            color = get_config_value(f"logging.colors.{component_name}")
        except ConfigurationError:
            color = None
        color = color or DEFAULT_COLORS.get(component_name, "white")

    return ComponentLogger(base_logger, component_name, color)
