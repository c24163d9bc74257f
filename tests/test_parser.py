## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth import parser
from tinyforth.types import NumberLiteral, WordReference, DefinitionStart, DefinitionEnd
from tinyforth.errors import MalformedNumber


def test_tokenize_splits_on_any_whitespace():
    assert parser.tokenize("1  2\tdup\n\n*  ") == ["1", "2", "dup", "*"]


def test_tokenize_empty_and_blank_input():
    assert parser.tokenize("") == []
    assert parser.tokenize(" \t\n ") == []


def test_tokenize_keeps_positions():
    tokens = parser.tokenize("2 square\n  .")
    assert [(t.line, t.column) for t in tokens] == [(1, 1), (1, 3), (2, 3)]


@pytest.mark.parametrize("n", [0, 7, -3, 42, 123456789012345678901234567890])
def test_integer_text_classifies_as_number(n):
    [token] = parser.tokenize(str(n))
    assert parser.classify(token) == NumberLiteral(n)


def test_explicit_plus_sign_is_a_number():
    assert parser.classify("+5") == NumberLiteral(5)


def test_word_classification():
    assert parser.classify("dup") == WordReference("dup")
    assert parser.classify("+") == WordReference("+")
    assert parser.classify(".") == WordReference(".")


def test_colon_and_semicolon_anywhere_in_token():
    assert parser.classify(":") == DefinitionStart()
    assert parser.classify("x:y") == DefinitionStart()
    assert parser.classify(";") == DefinitionEnd()
    assert parser.classify("end;") == DefinitionEnd()
    # Colon wins over semicolon.
    assert parser.classify(";:") == DefinitionStart()


@pytest.mark.parametrize("token", ["abc1", "a1", "1a", "1:", "2;", "--1", "1_000"])
def test_token_with_digit_must_be_an_integer(token):
    with pytest.raises(MalformedNumber) as exc:
        parser.classify(token)
    assert exc.value.forth_token == token


def test_parse_attaches_source_metadata():
    nodes = parser.parse("1 foo", filename="<test>")
    assert nodes == [NumberLiteral(1), WordReference("foo")]
    assert nodes[1].meta == {'filename': "<test>", 'line': 1, 'column': 3}


def test_parse_reports_location_of_malformed_number():
    with pytest.raises(MalformedNumber) as exc:
        parser.parse("1 2\n  x1 .", filename="<test>")
    assert exc.value.forth_meta['line'] == 2
    assert exc.value.forth_meta['column'] == 3


def test_format_source_context_highlights_token():
    text = parser.format_source_context("1 2\nfoo bar", {'filename': 'f.fs', 'line': 2, 'column': 5}, "bar")
    assert 'File "f.fs", line 2' in text
    assert "bar" in text and "foo" in text


def test_format_source_context_without_location():
    assert parser.format_source_context("1 2", None, "x") == ""
    assert parser.format_source_context("1 2", {'filename': None}, "x") == ""
