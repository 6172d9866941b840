"""
Tests for value coercion per field kind.
"""

import io
from datetime import date, datetime, time
from pathlib import Path

import pytest

from jsonform.coercion import UNSET, coerce_value, is_numeric, to_number
from jsonform.config import DEFAULT_CONFIG
from jsonform.errors import ValueCoercionError
from jsonform.kinds import FieldKind, map_kind


class TestNumbers:
    """Test integer and number kinds."""

    def test_integer_from_numeric_string(self):
        value = coerce_value(FieldKind.INTEGER, "42")
        assert value == 42
        assert isinstance(value, int)

    def test_integer_truncates(self):
        assert coerce_value(FieldKind.INTEGER, "3.7") == 3
        assert coerce_value(FieldKind.INTEGER, 9.99) == 9
        assert coerce_value(FieldKind.INTEGER, "1e3") == 1000

    def test_integer_non_numeric_passthrough(self):
        assert coerce_value(FieldKind.INTEGER, "abc") == "abc"
        assert coerce_value(FieldKind.INTEGER, None) is None
        assert coerce_value(FieldKind.INTEGER, True) is True

    def test_number_token_truncates_to_int(self):
        value = coerce_value(map_kind("number"), "3.7")
        assert value == 3
        assert isinstance(value, int)
        assert coerce_value(map_kind("number"), "x") == "x"

    def test_to_number(self):
        assert to_number(" 12 ") == 12
        assert to_number("-.5") == -0.5
        assert to_number("+3") == 3
        assert to_number("12abc") is None
        assert to_number(False) is None
        assert is_numeric(0)
        assert not is_numeric("inf")


class TestFiles:
    """Test the file kind."""

    def test_stream_is_kept(self):
        handle = io.BytesIO(b"data")
        assert coerce_value(FieldKind.FILE, handle) is handle

    def test_path_is_kept(self):
        path = Path("/tmp/upload.pdf")
        assert coerce_value(FieldKind.FILE, path) is path

    @pytest.mark.parametrize("value", ["/tmp/upload.pdf", None, b"bytes", 3])
    def test_other_values_leave_default_unset(self, value):
        """A file value is never synthesized from a string or bytes."""
        assert coerce_value(FieldKind.FILE, value) is UNSET

    def test_unset_is_falsy_singleton(self):
        assert not UNSET
        assert repr(UNSET) == "UNSET"
        assert type(UNSET)() is UNSET


class TestDates:
    """Test date, datetime and time kinds."""

    def test_date_objects_used_as_is(self):
        d = date(2024, 5, 1)
        assert coerce_value(FieldKind.DATE, d) is d
        dt = datetime(2024, 5, 1, 10, 30)
        assert coerce_value(FieldKind.DATETIME, dt) is dt
        t = time(8, 15)
        assert coerce_value(FieldKind.TIME, t) is t

    def test_iso_strings(self):
        assert coerce_value(FieldKind.DATE, "2024-05-01") == date(2024, 5, 1)
        assert coerce_value(FieldKind.DATETIME, "2024-05-01T10:30:00") == datetime(2024, 5, 1, 10, 30)
        assert coerce_value(FieldKind.TIME, "08:15") == time(8, 15)

    def test_narrowing(self):
        dt = datetime(2024, 5, 1, 10, 30)
        assert coerce_value(FieldKind.DATE, dt) == date(2024, 5, 1)
        assert coerce_value(FieldKind.TIME, dt) == time(10, 30)
        assert coerce_value(FieldKind.DATETIME, date(2024, 5, 1)) == datetime(2024, 5, 1)

    def test_fallback_formats(self):
        assert coerce_value(FieldKind.DATE, "01/05/2024", ["%d/%m/%Y"]) == date(2024, 5, 1)

    def test_time_string_in_date_field_raises(self):
        """A time-only pattern never fills a date field with 1900-01-01."""
        with pytest.raises(ValueCoercionError):
            coerce_value(FieldKind.DATE, "12:30", DEFAULT_CONFIG.date_formats)
        with pytest.raises(ValueCoercionError):
            coerce_value(FieldKind.DATETIME, "12:30", DEFAULT_CONFIG.date_formats)

    def test_date_string_in_time_field_raises(self):
        """A date-only pattern never fills a time field with midnight."""
        with pytest.raises(ValueCoercionError):
            coerce_value(FieldKind.TIME, "25/12/2024", DEFAULT_CONFIG.date_formats)

    def test_default_formats_per_kind(self):
        formats = DEFAULT_CONFIG.date_formats
        assert coerce_value(FieldKind.DATE, "25/12/2024", formats) == date(2024, 12, 25)
        assert coerce_value(FieldKind.DATETIME, "25/12/2024 10:30", formats) == datetime(2024, 12, 25, 10, 30)
        assert coerce_value(FieldKind.TIME, "25/12/2024 10:30", formats) == time(10, 30)

    def test_empty_values_have_no_default(self):
        assert coerce_value(FieldKind.DATE, None) is None
        assert coerce_value(FieldKind.DATETIME, "") is None

    def test_unparseable_string_raises(self):
        """Parse failures surface as ValueCoercionError, not as ValueError."""
        with pytest.raises(ValueCoercionError) as exc:
            coerce_value(FieldKind.DATE, "next tuesday")
        assert exc.value.kind == "date"
        assert exc.value.value == "next tuesday"

    def test_wrong_type_raises(self):
        with pytest.raises(ValueCoercionError):
            coerce_value(FieldKind.TIME, 1234)


def test_other_kinds_pass_through():
    marker = object()
    for kind in (FieldKind.TEXT, FieldKind.CHOICE, FieldKind.CHECKBOX, FieldKind.MONEY):
        assert coerce_value(kind, marker) is marker
