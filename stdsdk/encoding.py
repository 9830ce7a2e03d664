"""Value encoding for headers, query strings and form bodies.

Supported value shapes:
- bool: ``true`` / ``false``
- int: decimal digits
- str: verbatim
- list or tuple of str: repeated ``key=value`` pairs (comma joined as a header)
- datetime.timedelta: canonical duration string, e.g. ``1m30s``
- mapping of str to str: nested form-encoded fragment, e.g. ``a=1&b=2``

``None`` never contributes anything: the key is left out entirely.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, TypeAlias
from urllib.parse import urlencode

from .errors import UnencodableTypeError

TypedValue: TypeAlias = (
    bool | int | str | list[str] | tuple[str, ...] | timedelta | Mapping[str, str]
)

_NANOS_PER_MICRO = 1_000
_NANOS_PER_MILLI = 1_000_000
_NANOS_PER_SECOND = 1_000_000_000


def _fraction(value: int, scale: int) -> str:
    """Render value / scale with trailing zeros trimmed."""
    whole, rem = divmod(value, scale)
    if not rem:
        return str(whole)
    digits = len(str(scale)) - 1
    return f"{whole}.{str(rem).rjust(digits, '0').rstrip('0')}"


def format_duration(value: timedelta) -> str:
    """Format a timedelta in canonical duration form (``1h2m3.5s``, ``150ms``)."""
    nanos = (
        (value.days * 86_400 + value.seconds) * _NANOS_PER_SECOND
        + value.microseconds * _NANOS_PER_MICRO
    )
    if nanos == 0:
        return "0s"

    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos < _NANOS_PER_MICRO:
        return f"{sign}{nanos}ns"
    if nanos < _NANOS_PER_MILLI:
        return f"{sign}{_fraction(nanos, _NANOS_PER_MICRO)}µs"
    if nanos < _NANOS_PER_SECOND:
        return f"{sign}{_fraction(nanos, _NANOS_PER_MILLI)}ms"

    seconds, rem = divmod(nanos, _NANOS_PER_SECOND)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)

    out = f"{_fraction(seconds * _NANOS_PER_SECOND + rem, _NANOS_PER_SECOND)}s"
    if hours:
        out = f"{hours}h{minutes}m{out}"
    elif minutes:
        out = f"{minutes}m{out}"
    return sign + out


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _encode_mapping(value: Mapping[Any, Any], name: str | None) -> str:
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise UnencodableTypeError(value, name)
    return urlencode(sorted(value.items()))


def encode_value(value: Any, name: str | None = None) -> str | None:
    """Encode a single value to its string form.

    Returns None for None so callers can omit the key.

    Raises:
        UnencodableTypeError: If the value is not a supported shape.
    """
    if value is None:
        return None
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, Mapping):
        return _encode_mapping(value, name)
    if _is_string_list(value):
        return ",".join(value)
    raise UnencodableTypeError(value, name)


def encode_values(values: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Expand a mapping of typed values into ordered ``(key, value)`` pairs.

    Keys are sorted; list values expand to one pair per item.
    """
    pairs: list[tuple[str, str]] = []
    for key in sorted(values):
        value = values[key]
        if value is None:
            continue
        if _is_string_list(value):
            pairs.extend((key, item) for item in value)
            continue
        encoded = encode_value(value, key)
        if encoded is not None:
            pairs.append((key, encoded))
    return pairs


def encode_query(values: Mapping[str, Any]) -> str:
    """Percent-encode typed values as ``application/x-www-form-urlencoded``."""
    return urlencode(encode_values(values))
