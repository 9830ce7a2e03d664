"""Tests for value encoding."""

from __future__ import annotations

from datetime import timedelta
from urllib.parse import parse_qsl

import pytest

from stdsdk.encoding import encode_query, encode_value, encode_values, format_duration
from stdsdk.errors import SdkEncodingError, UnencodableTypeError


class TestEncodeValue:
    """Tests for encode_value()."""

    def test_none_contributes_nothing(self):
        assert encode_value(None) is None

    def test_bool(self):
        assert encode_value(True) == "true"
        assert encode_value(False) == "false"

    def test_int(self):
        assert encode_value(0) == "0"
        assert encode_value(-42) == "-42"

    def test_string_verbatim(self):
        assert encode_value("a b&c") == "a b&c"

    def test_duration(self):
        assert encode_value(timedelta(minutes=5)) == "5m0s"

    def test_string_list_joined(self):
        """Lists collapse to a comma separated single value."""
        assert encode_value(["a", "b"]) == "a,b"
        assert encode_value(("x",)) == "x"

    def test_mapping_is_nested_fragment(self):
        """Mappings encode as a sorted, percent-encoded fragment."""
        assert encode_value({"b": "x y", "a": "1"}) == "a=1&b=x+y"

    @pytest.mark.parametrize("value", [1.5, object(), [1, 2], {"a": 1}, b"raw"])
    def test_unencodable_types(self, value):
        with pytest.raises(UnencodableTypeError) as exc_info:
            encode_value(value)
        assert type(value).__name__ in str(exc_info.value)

    def test_unencodable_names_field(self):
        with pytest.raises(UnencodableTypeError, match="'limit'"):
            encode_value(1.5, "limit")

    def test_unencodable_is_encoding_error(self):
        """Unencodable values are both SDK encoding errors and TypeErrors."""
        with pytest.raises(SdkEncodingError):
            encode_value(object())
        with pytest.raises(TypeError):
            encode_value(object())


class TestFormatDuration:
    """Tests for format_duration()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (timedelta(0), "0s"),
            (timedelta(microseconds=1), "1µs"),
            (timedelta(microseconds=1500), "1.5ms"),
            (timedelta(milliseconds=100), "100ms"),
            (timedelta(seconds=1.5), "1.5s"),
            (timedelta(seconds=90), "1m30s"),
            (timedelta(hours=1), "1h0m0s"),
            (timedelta(seconds=3661, microseconds=500000), "1h1m1.5s"),
            (timedelta(days=1, hours=2, minutes=3, seconds=4), "26h3m4s"),
            (timedelta(seconds=-2), "-2s"),
        ],
    )
    def test_canonical_form(self, value, expected):
        assert format_duration(value) == expected


class TestEncodeValues:
    """Tests for encode_values() and encode_query()."""

    def test_sorted_with_repeated_list_keys(self):
        """Keys are sorted and list values repeat the key in order."""
        pairs = encode_values({"b": ["x", "y"], "a": "1"})
        assert pairs == [("a", "1"), ("b", "x"), ("b", "y")]

    def test_none_values_skipped(self):
        assert encode_values({"a": None, "b": True}) == [("b", "true")]

    def test_query_string(self):
        query = encode_query({"b": ["x", "y"], "a": "1"})
        assert query == "a=1&b=x&b=y"
        assert query.count("b=") == 2

    def test_percent_encoding(self):
        assert encode_query({"q": "a&b=c d"}) == "q=a%26b%3Dc+d"

    def test_mapping_value_is_single_escaped_value(self):
        assert encode_query({"labels": {"env": "prod"}}) == "labels=env%3Dprod"

    def test_empty(self):
        assert encode_query({}) == ""

    def test_unencodable_value_raises(self):
        with pytest.raises(UnencodableTypeError, match="'bad'"):
            encode_query({"bad": 2.5})

    def test_parsed_back_matches_string_form(self):
        """Decoding the query string gives back each value's string form."""
        values = {
            "flag": False,
            "count": 3,
            "name": "web app/1",
            "wait": timedelta(seconds=30),
        }
        parsed = dict(parse_qsl(encode_query(values)))
        assert parsed == {key: encode_value(value) for key, value in values.items()}
