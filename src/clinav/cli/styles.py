"""Color themes and style helpers for clinav.

Every drawing surface (the terminal renderer, questionary prompts, the
``tree`` and ``themes`` commands) receives its :class:`ColorTheme`
explicitly. There is no process-wide active theme: two sessions in one
process may use different themes.

Design Philosophy:
- Semantic style names (``cursor``, ``error``, ``footer``) rather than colors
- A frozen registry of named themes
- Rich theme and questionary style built from the same :class:`ColorTheme`
"""

import sys
from dataclasses import dataclass, field
from types import MappingProxyType

from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from questionary import Style as QuestionaryStyle
from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from clinav.engine.frames import FrameStyle
from clinav.errors import ConfigurationError

# ============================================================================
# THEME DEFINITION
# ============================================================================


@dataclass(frozen=True)
class ColorTheme:
    """A complete color scheme.

    ``primary`` marks the cursor and titles, ``secondary`` descriptions,
    ``muted`` disabled entries and key hints. ``bordered=False`` draws
    frames without a box.

    Derived colors (lighter/darker variations) are calculated on creation.
    """

    name: str
    primary: str
    secondary: str
    success: str
    warning: str
    error: str
    muted: str
    background: str
    foreground: str
    bordered: bool = True

    primary_dark: str = field(init=False)
    primary_light: str = field(init=False)
    muted_dim: str = field(init=False)

    def __post_init__(self):
        """Calculate derived colors from theme colors."""
        object.__setattr__(self, "primary_dark", self._adjust_brightness(self.primary, 0.75))
        object.__setattr__(self, "primary_light", self._adjust_brightness(self.primary, 1.2))
        object.__setattr__(self, "muted_dim", self._adjust_brightness(self.muted, 0.8))

    @staticmethod
    def _adjust_brightness(hex_color: str, factor: float) -> str:
        """Adjust brightness of a hex color by a factor.

        Args:
            hex_color: Hex color string (e.g., "#ff0000")
            factor: Brightness multiplier (0.0-1.0 darkens, >1.0 lightens)

        Returns:
            Adjusted hex color string
        """
        hex_color = hex_color.lstrip("#")
        r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
        r = max(0, min(255, int(r * factor)))
        g = max(0, min(255, int(g * factor)))
        b = max(0, min(255, int(b * factor)))
        return f"#{r:02x}{g:02x}{b:02x}"


# ============================================================================
# PREDEFINED THEMES
# ============================================================================

DEFAULT_THEME = ColorTheme(
    name="default",
    primary="#5fd7d7",
    secondary="#8a8a8a",
    success="#5fff00",
    warning="#ffff87",
    error="#ff0000",
    muted="#6c6c6c",
    background="#262626",
    foreground="#eeeeee",
)

DARK_THEME = ColorTheme(
    name="dark",
    primary="#5fd7d7",
    secondary="#8a8a8a",
    success="#5fff00",
    warning="#ffff87",
    error="#ff0000",
    muted="#6c6c6c",
    background="#303030",
    foreground="#d0d0d0",
)

LIGHT_THEME = ColorTheme(
    name="light",
    primary="#005fd7",
    secondary="#8a8a8a",
    success="#008700",
    warning="#ffaf00",
    error="#d70000",
    muted="#8a8a8a",
    background="#eeeeee",
    foreground="#000000",
)

MINIMAL_THEME = ColorTheme(
    name="minimal",
    primary="#c0c0c0",
    secondary="#808080",
    success="#c0c0c0",
    warning="#c0c0c0",
    error="#c0c0c0",
    muted="#808080",
    background="#000000",
    foreground="#c0c0c0",
    bordered=False,
)

DRACULA_THEME = ColorTheme(
    name="dracula",
    primary="#bd93f9",
    secondary="#6272a4",
    success="#50fa7b",
    warning="#f1fa8c",
    error="#ff5555",
    muted="#6272a4",
    background="#282a36",
    foreground="#f8f8f2",
)

NORD_THEME = ColorTheme(
    name="nord",
    primary="#88c0d0",
    secondary="#4c566a",
    success="#a3be8c",
    warning="#ebcb8b",
    error="#bf616a",
    muted="#4c566a",
    background="#2e3440",
    foreground="#d8dee9",
)

MONOKAI_THEME = ColorTheme(
    name="monokai",
    primary="#66d9ef",
    secondary="#75715e",
    success="#a6e22e",
    warning="#e6db74",
    error="#f92672",
    muted="#75715e",
    background="#272822",
    foreground="#f8f8f2",
)

# Theme registry for lookup by name
THEMES = MappingProxyType(
    {
        theme.name: theme
        for theme in (
            DEFAULT_THEME,
            DARK_THEME,
            LIGHT_THEME,
            MINIMAL_THEME,
            DRACULA_THEME,
            NORD_THEME,
            MONOKAI_THEME,
        )
    }
)


def get_theme(name: str | None) -> ColorTheme:
    """Look up a theme by name; ``None`` or an empty name gives the default.

    :raises ConfigurationError: For unknown names
    """
    if not name:
        return DEFAULT_THEME
    try:
        return THEMES[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown theme '{name}'",
            suggestion=f"Available themes: {', '.join(THEMES)}",
        ) from None


# ============================================================================
# RICH THEME & QUESTIONARY STYLES
# ============================================================================


def build_rich_theme(theme: ColorTheme) -> Theme:
    """Build a Rich Theme from a ColorTheme.

    Covers the frame style names drawn by the state machines plus the status
    styles used by :class:`Messages`.
    """
    return Theme(
        {
            # Frame styles
            FrameStyle.TITLE: f"bold {theme.primary}",
            FrameStyle.ENTRY: theme.foreground,
            FrameStyle.CURSOR: f"bold {theme.primary}",
            FrameStyle.DISABLED: theme.muted_dim,
            FrameStyle.DESCRIPTION: theme.secondary,
            FrameStyle.HIGHLIGHT: f"bold underline {theme.primary_light}",
            FrameStyle.QUERY: f"bold {theme.warning}",
            FrameStyle.LABEL: f"bold {theme.foreground}",
            FrameStyle.VALUE: theme.success,
            FrameStyle.EDIT: f"underline {theme.warning}",
            FrameStyle.SCOPE: f"italic {theme.primary_dark}",
            FrameStyle.ERROR: f"bold {theme.error}",
            FrameStyle.FOOTER: theme.muted,
            FrameStyle.BUTTON: f"{theme.foreground} on {theme.background}",
            FrameStyle.BUTTON_ACTIVE: f"bold {theme.background} on {theme.primary}",
            # Status styles
            "success": f"bold {theme.success}",
            "warning": f"bold {theme.warning}",
            "info": f"bold {theme.primary}",
            # Text styles
            "primary": f"bold {theme.primary}",
            "secondary": theme.secondary,
            "dim": theme.muted,
            "header": f"bold {theme.primary}",
            "command": theme.primary_light,
            "border": theme.muted,
        }
    )


def build_questionary_style(theme: ColorTheme) -> QuestionaryStyle:
    """Build a Questionary style from a ColorTheme."""
    return QuestionaryStyle(
        [
            ("qmark", f"fg:{theme.primary} bold"),  # Question mark
            ("question", "bold"),  # Question text
            ("answer", f"fg:{theme.success} bold"),  # User's answer
            ("pointer", f"fg:{theme.primary} bold"),  # Selection pointer
            ("highlighted", f"fg:{theme.primary} bold"),  # Highlighted item
            ("selected", f"fg:{theme.primary_light}"),  # Selected item
            ("separator", f"fg:{theme.muted}"),  # Separators
            ("instruction", f"fg:{theme.muted} italic"),  # Instructions
            ("text", f"fg:{theme.secondary}"),  # Regular text
            ("disabled", f"fg:{theme.muted_dim} italic"),  # Disabled items
            ("validation-toolbar", f"fg:{theme.error} bold"),  # Rejected input
        ]
    )


def make_console(theme: ColorTheme | None = None, **kwargs) -> Console:
    """Console with the rich styles of ``theme`` (default theme if omitted)."""
    rich_theme = build_rich_theme(theme or DEFAULT_THEME)
    # On Windows, force UTF-8 output for the ✓ / ❯ / ✗ glyphs
    if sys.platform == "win32":
        kwargs.setdefault("force_terminal", True)
        kwargs.setdefault("legacy_windows", False)
    return Console(theme=rich_theme, **kwargs)


# ============================================================================
# QUESTIONARY KEY BINDINGS
# ============================================================================


def get_key_bindings() -> KeyBindings:
    """Key bindings for questionary prompts: ESC aborts like Ctrl+C."""
    bindings = KeyBindings()

    @bindings.add(Keys.Escape, eager=True)
    def _(event):
        event.app.exit(exception=KeyboardInterrupt)

    return bindings


# ============================================================================
# STYLE HELPERS
# ============================================================================


class Styles:
    """Style names defined by :func:`build_rich_theme`, for Rich markup."""

    SUCCESS = "success"
    ERROR = FrameStyle.ERROR
    WARNING = "warning"
    INFO = "info"

    PRIMARY = "primary"
    SECONDARY = "secondary"
    DIM = "dim"
    HEADER = "header"
    COMMAND = "command"
    BORDER = "border"


class Messages:
    """Pre-formatted message helpers for common patterns."""

    @staticmethod
    def success(text: str) -> str:
        return f"[success]✓ {escape(text)}[/success]"

    @staticmethod
    def error(text: str) -> str:
        return f"[error]✗ {escape(text)}[/error]"

    @staticmethod
    def warning(text: str) -> str:
        return f"[warning]⚠️  {escape(text)}[/warning]"

    @staticmethod
    def info(text: str) -> str:
        return f"[info]ℹ️  {escape(text)}[/info]"

    @staticmethod
    def header(text: str) -> str:
        return f"[header]{escape(text)}[/header]"

    @staticmethod
    def command(text: str) -> str:
        """Format a command line."""
        return f"[command]{escape(text)}[/command]"


__all__ = [
    "ColorTheme",
    "DEFAULT_THEME",
    "THEMES",
    "get_theme",
    "build_rich_theme",
    "build_questionary_style",
    "make_console",
    "get_key_bindings",
    "Styles",
    "Messages",
]
