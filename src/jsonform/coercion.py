"""
Value coercion.

Turns the raw value a question resolves to (caller data, then the
question's own "data", then None) into the initial value appropriate for
the field's kind.
"""

from __future__ import annotations

import io
import math
import re
from datetime import date, datetime, time
from pathlib import PurePath
from typing import Any, Iterable, Optional, Union

from jsonform.errors import ValueCoercionError
from jsonform.kinds import FieldKind


class _Unset:
    """Marker for "no default value": the host keeps its own empty state."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

Number = Union[int, float]

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

FILE_TYPES = (io.IOBase, PurePath)

_DATE_DIRECTIVES = re.compile(r"%[aAbBdjmUWyY]")
_TIME_DIRECTIVES = re.compile(r"%[HIMSfp]")


def to_number(value: Any) -> Optional[Number]:
    """
    Return value as int/float if it is numeric, else None.

    Numeric means a real int/float (bool excluded) or a string holding a
    decimal or exponent literal, optionally padded with whitespace.
    "nan", "inf" and hex strings are not numeric.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return float(text)
    return None


def is_numeric(value: Any) -> bool:
    return to_number(value) is not None


def is_file_object(value: Any) -> bool:
    """True for file objects handed over by the host (streams, paths)."""
    return isinstance(value, FILE_TYPES)


def _format_fits(kind: FieldKind, fmt: str) -> bool:
    """True if a strptime pattern yields the parts a kind needs."""
    if kind is FieldKind.TIME:
        return bool(_TIME_DIRECTIVES.search(fmt))
    return bool(_DATE_DIRECTIVES.search(fmt))


def _parse_temporal(kind: FieldKind, text: str, formats: Iterable[str]) -> Any:
    text = text.strip()
    parsed: Any = None
    try:
        if kind is FieldKind.TIME:
            parsed = time.fromisoformat(text)
        else:
            parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in formats:
            if not _format_fits(kind, fmt):
                continue
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        raise ValueCoercionError(kind.value, text)

    if kind is FieldKind.DATE:
        return parsed.date() if isinstance(parsed, datetime) else parsed
    if kind is FieldKind.TIME and isinstance(parsed, datetime):
        return parsed.time()
    return parsed


def _coerce_temporal(kind: FieldKind, value: Any, formats: Iterable[str]) -> Any:
    if value is None or value == "":
        return None
    if kind is FieldKind.DATETIME:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
    elif kind is FieldKind.DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
    elif kind is FieldKind.TIME:
        if isinstance(value, time):
            return value
        if isinstance(value, datetime):
            return value.time()
    if not isinstance(value, str):
        raise ValueCoercionError(kind.value, value)
    return _parse_temporal(kind, value, formats)


def coerce_value(kind: FieldKind, value: Any, date_formats: Iterable[str] = ()) -> Any:
    """
    Convert a raw value into the initial value for a field of the given kind.

    Args:
        kind: FieldKind of the field
        value: Raw value (caller data, question default or None)
        date_formats: strptime patterns tried after ISO-8601 for date kinds.
            date and datetime fields only try patterns with date directives,
            time fields only patterns with time directives.

    Returns:
        The coerced value; UNSET for file fields without a host file object.
        An empty date/time value (None or "") gives None, so the field has
        no initial value; it is not replaced by the current date or time.

    Raises:
        ValueCoercionError: If a date/datetime/time value cannot be parsed
    """
    if kind is FieldKind.INTEGER:
        number = to_number(value)
        if number is None or (isinstance(number, float) and not math.isfinite(number)):
            return value
        return int(number)
    if kind is FieldKind.FILE:
        return value if is_file_object(value) else UNSET
    if kind.is_temporal:
        return _coerce_temporal(kind, value, date_formats)
    return value
