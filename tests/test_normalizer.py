"""Tests for model output normalization."""

import json

import pytest

from versus.normalizer import (
    ParseStatus,
    extract_balanced_object,
    extract_greedy_object,
    normalize,
)


def test_plain_json_is_parsed():
    text = json.dumps({"winner": "A", "scores": {}})

    result = normalize(text)

    assert result.status == ParseStatus.PARSED
    assert result.ok
    assert result.data == {"winner": "A", "scores": {}}
    assert result.raw == text


def test_json_surrounded_by_prose_is_recovered():
    text = 'Sure! Here is the comparison:\n{"winner": "B", "summary": "close"}\nHope this helps.'

    result = normalize(text)

    assert result.status == ParseStatus.RECOVERED
    assert result.data == {"winner": "B", "summary": "close"}
    assert result.raw == text


def test_code_fenced_json_is_recovered():
    text = '```json\n{"winner": "Tie"}\n```'

    result = normalize(text)

    assert result.status == ParseStatus.RECOVERED
    assert result.data == {"winner": "Tie"}


@pytest.mark.parametrize("text", ["not json at all", "", "{ broken", "[1, 2, 3]", '"just a string"', "42"])
def test_unusable_output_degrades_to_raw(text):
    """Test malformed output never raises and keeps the raw text"""
    result = normalize(text)

    assert result.status == ParseStatus.UNPARSED
    assert result.ok is False
    assert result.data is None
    assert result.raw == text


def test_prose_braces_before_json_are_skipped():
    text = 'Scores use {curly} notation. {"winner": "A"}'

    assert normalize(text).data == {"winner": "A"}


def test_first_of_several_objects_wins():
    """Test the balanced scan stops at the first complete object"""
    text = 'First {"winner": "A"} then {"winner": "B"}'

    result = normalize(text)

    assert result.status == ParseStatus.RECOVERED
    assert result.data == {"winner": "A"}


def test_braces_inside_strings_do_not_end_the_object():
    text = 'Result: {"note": "use } and { carefully", "nested": {"a": 1}} done'

    assert extract_balanced_object(text) == '{"note": "use } and { carefully", "nested": {"a": 1}}'
    assert normalize(text).data == {"note": "use } and { carefully", "nested": {"a": 1}}


def test_escaped_quotes_inside_strings():
    text = 'x {"quote": "he said \\"}\\" loudly", "b": 2} y'

    assert normalize(text).data == {"quote": 'he said "}" loudly', "b": 2}


def test_balanced_scan_returns_none_without_object():
    assert extract_balanced_object("no braces here") is None
    assert extract_balanced_object("{ never closed") is None


def test_greedy_span_runs_first_to_last_brace():
    assert extract_greedy_object('a {"x": 1} b {"y": 2} c') == '{"x": 1} b {"y": 2}'
    assert extract_greedy_object("} backwards {") is None
    assert extract_greedy_object("nothing") is None
