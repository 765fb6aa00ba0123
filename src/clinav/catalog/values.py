"""Parameter value conversion.

Form values travel through the engine as plain strings. This module converts
those strings into typed values for each :class:`ParameterType`, and turns
host defaults (booleans, durations, sequences) back into the string form the
form engine edits.
"""

import re
import shlex
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from clinav.errors import ValidationError

# Literal values a boolean parameter flips between
BOOL_TRUE = "true"
BOOL_FALSE = "false"

_TRUTHY = frozenset({"true", "1", "yes", "y", "on", "t"})
_FALSY = frozenset({"false", "0", "no", "n", "off", "f"})

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

# Seconds per unit
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_bool(raw: str) -> bool:
    """Parse a boolean literal (``true``/``false`` and the usual aliases)."""
    text = raw.strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"'{raw}' is not a valid boolean (use true or false)")


def parse_duration(raw: str) -> timedelta:
    """Parse a duration such as ``300ms``, ``1h30m`` or ``2.5s``.

    A bare ``0`` is accepted. A leading ``-`` or ``+`` sign is allowed.

    :param raw: Duration text
    :raises ValueError: If the text is not a sequence of number/unit pairs

    Examples::

        >>> parse_duration("1h30m")
        datetime.timedelta(seconds=5400)
        >>> parse_duration("250ms").total_seconds()
        0.25
    """
    text = raw.strip()
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"'{raw}' is not a valid duration")

    total = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if match is None:
            raise ValueError(f"'{raw}' is not a valid duration (expected e.g. 30s, 5m, 1h30m)")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    return timedelta(seconds=total * sign)


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compact form :func:`parse_duration` reads."""
    micros = value // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    hours, rest = divmod(abs(micros), 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds, micros = divmod(rest, 1_000_000)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or (micros and parts):
        text = f"{seconds}.{micros:06d}".rstrip("0").rstrip(".")
        parts.append(f"{text}s")
    elif micros:
        parts.append(f"{micros // 1000}ms" if micros % 1000 == 0 else f"{micros}us")
    if not parts:
        return "0s"
    return sign + "".join(parts)


def to_text(value: Any) -> str:
    """Convert a host default into the string form used by the form engine."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return BOOL_TRUE if value else BOOL_FALSE
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return shlex.join(str(item) for item in value)
    return str(value)


def convert_builtin(
    kind: Any, raw: str, options: Sequence[str] = (), name: str | None = None, multiple: bool = False
) -> Any:
    """Convert ``raw`` according to a parameter type.

    :param kind: A :class:`~clinav.catalog.types.ParameterType`
    :param raw: String value from the form
    :param options: Allowed values for enum parameters
    :param name: Parameter name used in error messages
    :param multiple: ``raw`` holds shell-quoted items, each checked on its own
    :return: The converted value, or a tuple of them when ``multiple``
    :raises ValidationError: If the value does not match the type
    """
    # Imported here because types.py depends on this module
    from clinav.catalog.types import ParameterType

    label = f"'{name}'" if name else "value"
    if multiple:
        try:
            items = shlex.split(raw)
        except ValueError as exc:
            raise ValidationError(f"Invalid {label}: {exc}", parameter=name) from exc
        return tuple(convert_builtin(kind, item, options, name) for item in items)

    try:
        if kind is ParameterType.BOOL:
            return parse_bool(raw)
        if kind is ParameterType.INT:
            return int(raw.strip(), 10)
        if kind is ParameterType.DURATION:
            return parse_duration(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {exc}", parameter=name) from exc

    if kind is ParameterType.ENUM and options and raw not in options:
        raise ValidationError(
            f"Invalid {label}: '{raw}' is not one of {', '.join(options)}",
            parameter=name,
        )
    return raw
