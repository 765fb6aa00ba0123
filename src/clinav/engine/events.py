"""Input events consumed by the engine's state machines.

Key names follow prompt_toolkit's spelling (``"up"``, ``"c-c"``,
``"s-tab"``) so a terminal driver can pass most keys through untouched.
Printable characters are their own key name.
"""

from dataclasses import dataclass


class Keys:
    """Key names understood by the state machines."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    TAB = "tab"
    SHIFT_TAB = "s-tab"
    SPACE = " "
    CTRL_C = "c-c"
    CTRL_R = "c-r"
    CTRL_S = "c-s"
    CTRL_U = "c-u"


@dataclass(frozen=True)
class Viewport:
    """Terminal dimensions last reported to a machine."""

    width: int = 80
    height: int = 24


@dataclass(frozen=True)
class KeyEvent:
    key: str

    @property
    def is_character(self) -> bool:
        """Whether the key inserts text (a single printable character)."""
        return len(self.key) == 1 and self.key.isprintable()


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int

    @property
    def viewport(self) -> Viewport:
        return Viewport(width=max(self.width, 1), height=max(self.height, 1))


@dataclass(frozen=True)
class CancelEvent:
    """Injected by a host to end a machine from outside, e.g. on a session timeout."""

    reason: str = ""


Event = KeyEvent | ResizeEvent | CancelEvent
