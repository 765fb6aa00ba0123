"""
Configuration System

Everything configurable about a session lives in one explicit record,
:class:`TUIConfig`, whose field defaults are the documented defaults. Hosts
build it directly, or load it from the ``tui:`` section of a YAML file:

.. code-block:: yaml

    tui:
      theme: nord
      flat: true
      confirm_before_execute: ${CLINAV_CONFIRM:-true}

    logging:
      colors:
        controller: cyan

Features:
- Single-file YAML loading with ``${VAR}`` / ``${VAR:-default}`` resolution
- ``.env`` loading from the working directory (existing variables win)
- ``CLINAV_TUI`` environment toggle and terminal auto-detection
"""

import logging
import os
import re
import sys
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from clinav.errors import ConfigurationError

# Standard logging (not get_logger) to avoid a circular import with logger.py
logger = logging.getLogger("clinav.config")

ENV_TOGGLE = "CLINAV_TUI"
ENV_CONFIG_FILE = "CLINAV_CONFIG"
DEFAULT_CONFIG_FILE = "clinav.yml"

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(.*?))?\}|\$([A-Za-z_][A-Za-z0-9_]*)")
_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


class InteractiveMode(Enum):
    """How the host decides between the interactive engine and plain CLI.

    Modes:
        AUTO: Use the TUI when requested (flag, env toggle, ``enabled``)
        TUI: Always use the TUI
        CLI: Never use the TUI
    """

    AUTO = "auto"
    TUI = "tui"
    CLI = "cli"


@dataclass(frozen=True)
class TUIConfig:
    """Session configuration with documented defaults.

    :param enabled: Start the TUI without an explicit ``--tui`` flag
    :param theme: Name of a theme from :data:`clinav.cli.styles.THEMES`
    :param show_description: Show descriptions next to menu entries and parameters
    :param show_parameters: Offer the parameter form after a command is chosen
    :param interactive_mode: Force or forbid the TUI, see :class:`InteractiveMode`
    :param auto_detect: With ``enabled``, only start the TUI on an interactive terminal
    :param confirm_before_execute: Ask for confirmation before handing off the command
    :param flat: Show all runnable commands in one searchable list
    :param full_screen: Use the terminal's alternate screen while prompting
    :param search_key: Key that starts searching in a menu
    """

    enabled: bool = False
    theme: str = "default"
    show_description: bool = True
    show_parameters: bool = True
    interactive_mode: InteractiveMode = InteractiveMode.AUTO
    auto_detect: bool = True
    confirm_before_execute: bool = True
    flat: bool = False
    full_screen: bool = False
    search_key: str = "/"

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "TUIConfig":
        """Build a config from a plain mapping (e.g. the ``tui:`` YAML section).

        :raises ConfigurationError: On unknown keys or values of the wrong type
        """
        known = {item.name: item for item in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(
                f"Unknown tui setting(s): {', '.join(unknown)}",
                suggestion=f"Valid settings: {', '.join(known)}",
            )
        return cls(**{name: _coerce(name, known[name].default, value) for name, value in data.items()})

    def with_overrides(self, **changes: Any) -> "TUIConfig":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{name: value for name, value in changes.items() if value is not None})


def _coerce(name: str, default: Any, value: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ConfigurationError(f"Setting '{name}' must be true or false, got {value!r}")
    if isinstance(default, InteractiveMode):
        try:
            return value if isinstance(value, InteractiveMode) else InteractiveMode(str(value).lower())
        except ValueError as exc:
            choices = ", ".join(mode.value for mode in InteractiveMode)
            raise ConfigurationError(f"Setting '{name}' must be one of {choices}, got {value!r}") from exc
    if not isinstance(value, str):
        raise ConfigurationError(f"Setting '{name}' must be a string, got {value!r}")
    return value


class ConfigLoader:
    """Loads one YAML configuration file with environment resolution.

    Path resolution order: the explicit ``config_path``, then
    ``$CLINAV_CONFIG``, then ``./clinav.yml`` if it exists. With none of
    those, the configuration is empty and every lookup returns its default.
    """

    def __init__(self, config_path: str | Path | None = None):
        dotenv_path = Path.cwd() / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path, override=False)
            logger.debug(f"Loaded .env file from {dotenv_path}")

        if config_path is None:
            config_path = os.environ.get(ENV_CONFIG_FILE)
        if config_path is None:
            candidate = Path.cwd() / DEFAULT_CONFIG_FILE
            config_path = candidate if candidate.exists() else None
        elif not Path(config_path).exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        self.config_path = Path(config_path) if config_path is not None else None
        self.raw_config = self._load() if self.config_path is not None else {}

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.config_path) as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration {self.config_path}: {e}") from e

        if config is None:
            logger.warning(f"Configuration file is empty: {self.config_path}")
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {self.config_path}")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, data: Any) -> Any:
        """Recursively resolve ``${VAR}``, ``${VAR:-default}`` and ``$VAR`` references."""
        if isinstance(data, dict):
            return {key: self._resolve_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self._resolve_env_vars(item) for item in data]
        if not isinstance(data, str):
            return data

        def replace_env_var(match):
            if match.group(1):
                var_name, default_value = match.group(1), match.group(2)
            else:
                var_name, default_value = match.group(3), None

            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default_value is not None:
                return default_value
            logger.info(f"Environment variable '{var_name}' not found, keeping original value")
            return match.group(0)

        return _ENV_PATTERN.sub(replace_env_var, data)

    def get(self, path: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated path."""
        value = self.raw_config
        try:
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default


def get_config_value(path: str, default: Any = None, config_path: str | Path | None = None) -> Any:
    """Read one value from the configuration file.

    Examples:
        >>> get_config_value("tui.theme", "default")
        'default'
        >>> get_config_value("logging.colors.controller")
    """
    if not path:
        raise ValueError("Configuration path cannot be empty or None")
    return ConfigLoader(config_path).get(path, default)


def load_tui_config(config_path: str | Path | None = None, **overrides: Any) -> TUIConfig:
    """Load :class:`TUIConfig` from the ``tui:`` section and apply overrides.

    Overrides set to ``None`` are ignored, so CLI options can be passed
    straight through.

    :raises ConfigurationError: If the file is invalid
    """
    section = ConfigLoader(config_path).get("tui", {}) or {}
    if not isinstance(section, dict):
        raise ConfigurationError("The 'tui' configuration section must be a mapping")
    return TUIConfig.from_mapping(section).with_overrides(**overrides)


def env_enabled(environ: dict[str, str] | None = None) -> bool:
    """Whether the ``CLINAV_TUI`` environment toggle is on."""
    environ = os.environ if environ is None else environ
    return environ.get(ENV_TOGGLE, "").strip().lower() in _TRUE_STRINGS


def is_interactive_terminal() -> bool:
    """Whether both stdin and stdout are attached to a terminal."""
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        # Replaced or closed streams
        return False


def should_use_tui(
    config: TUIConfig,
    flag: bool = False,
    interactive: bool | None = None,
    environ: dict[str, str] | None = None,
) -> bool:
    """Decide whether a host should start an interactive session.

    Order: forced ``interactive_mode``, then the ``--tui`` flag, then the
    ``CLINAV_TUI`` toggle, then ``enabled`` (which honours ``auto_detect``).

    :param config: Session configuration
    :param flag: Whether ``--tui`` was given
    :param interactive: Terminal state; detected when ``None``
    :param environ: Environment to read the toggle from
    """
    if config.interactive_mode is InteractiveMode.CLI:
        return False
    if config.interactive_mode is InteractiveMode.TUI:
        return True
    if flag or env_enabled(environ):
        return True
    if config.enabled:
        if config.auto_detect:
            return is_interactive_terminal() if interactive is None else interactive
        return True
    return False
