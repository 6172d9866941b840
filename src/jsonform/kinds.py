"""
Field kinds.

A schema declares each question with a loose type token ("email", "number",
"choice", ...). map_kind() resolves that token to the internal FieldKind tag
that the rest of the interpreter (coercion, tree output) works with.

Unknown tokens are NOT errors: they silently fall back to FieldKind.TEXT.
"""

from enum import Enum


class FieldKind(Enum):
    """
    Internal field kinds.

    The value is the canonical token a host rendering layer binds to a
    concrete control.
    """

    TEXT = "text"
    EMAIL = "email"
    INTEGER = "integer"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    URL = "url"
    TEL = "tel"
    SEARCH = "search"
    PASSWORD = "password"
    RANGE = "range"
    PERCENT = "percent"
    MONEY = "money"
    COUNTRY = "country"
    LANGUAGE = "language"
    LOCALE = "locale"
    CURRENCY = "currency"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    CHOICE = "choice"
    FILE = "file"
    COLLECTION = "collection"

    @property
    def is_numeric(self) -> bool:
        return self is FieldKind.INTEGER

    @property
    def is_temporal(self) -> bool:
        return self in (FieldKind.DATE, FieldKind.DATETIME, FieldKind.TIME)


DEFAULT_KIND = FieldKind.TEXT

_KIND_BY_TOKEN = {kind.value: kind for kind in FieldKind}
# "number" and "integer" share one kind: numeric values truncate to int.
_KIND_BY_TOKEN["number"] = FieldKind.INTEGER


def map_kind(type_token: str) -> FieldKind:
    """
    Resolve a schema type token to a FieldKind.

    Args:
        type_token: Token from the question's "type" property

    Returns:
        The matching FieldKind, or FieldKind.TEXT for unknown tokens
    """
    if not isinstance(type_token, str):
        return DEFAULT_KIND
    return _KIND_BY_TOKEN.get(type_token, DEFAULT_KIND)


def is_known_kind(type_token: str) -> bool:
    """True if the token maps to a kind without falling back."""
    return isinstance(type_token, str) and type_token in _KIND_BY_TOKEN
