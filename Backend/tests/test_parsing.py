"""
JSON extraction from model output.
"""
import pytest

from studio.core.exceptions import ParseError
from studio.llm.parsing import extract_json, parse_json


def test_plain_object():
    assert extract_json('{"jsx": "<div/>", "css": ""}') == {"jsx": "<div/>", "css": ""}


def test_object_wrapped_in_prose_and_fences():
    text = 'Here you go:\n```json\n{"jsx": "x", "nested": {"a": 1}}\n```\nEnjoy!'
    assert extract_json(text) == {"jsx": "x", "nested": {"a": 1}}


def test_greedy_match_spans_first_to_last_brace():
    # Two separate objects make the greedy block invalid JSON
    assert extract_json('{"a": 1} and {"b": 2}') is None


def test_no_braces():
    assert extract_json("no json here") is None
    assert extract_json("") is None


def test_invalid_json_returns_none():
    assert extract_json("{not: valid}") is None


def test_non_object_json_is_ignored():
    assert extract_json("[1, 2, 3]") is None


def test_parse_json_distinguishes_missing_from_broken():
    assert parse_json("no json here") is None

    with pytest.raises(ParseError, match="Failed to parse AI response"):
        parse_json('{"jsx": "unterminated}')

    with pytest.raises(ParseError):
        parse_json('{"a": 1} and {"b": 2}')
