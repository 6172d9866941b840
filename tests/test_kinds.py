"""
Tests for type token -> FieldKind mapping.
"""

import pytest

from jsonform.kinds import FieldKind, is_known_kind, map_kind


@pytest.mark.parametrize("token, kind", [
    ("text", FieldKind.TEXT),
    ("email", FieldKind.EMAIL),
    ("number", FieldKind.INTEGER),
    ("integer", FieldKind.INTEGER),
    ("date", FieldKind.DATE),
    ("datetime", FieldKind.DATETIME),
    ("time", FieldKind.TIME),
    ("money", FieldKind.MONEY),
    ("choice", FieldKind.CHOICE),
    ("file", FieldKind.FILE),
    ("collection", FieldKind.COLLECTION),
])
def test_known_tokens(token, kind):
    assert map_kind(token) is kind
    assert is_known_kind(token)


@pytest.mark.parametrize("token", ["textarea", "Email", "", "slider", None, 3])
def test_unknown_tokens_fall_back_to_text(token):
    """Unknown tokens are not an error."""
    assert map_kind(token) is FieldKind.TEXT
    assert not is_known_kind(token)


def test_all_documented_tokens_are_mapped():
    tokens = [
        "text", "email", "number", "integer", "date", "datetime", "time", "url",
        "tel", "search", "password", "range", "percent", "money", "country",
        "language", "locale", "currency", "checkbox", "radio", "choice", "file",
        "collection",
    ]
    assert all(is_known_kind(t) for t in tokens)
    assert len({map_kind(t) for t in tokens}) == len(tokens) - 1


def test_number_and_integer_share_a_kind():
    assert map_kind("number") is map_kind("integer") is FieldKind.INTEGER


def test_kind_groups():
    assert FieldKind.INTEGER.is_numeric
    assert not FieldKind.MONEY.is_numeric
    assert FieldKind.TIME.is_temporal
    assert not FieldKind.TEXT.is_temporal
