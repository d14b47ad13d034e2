"""Tests for literal and regex search terms."""

import re

import pytest

from used_in_tc.search_terms import (
    InvalidSearchTermError,
    LiteralTerm,
    PatternTerm,
    make_term,
    word_bounded,
)

SOURCE = """import foo

def helper():
    foo.bar()
    foo.bar(); foo.bar()

foo.barbaz = 1
"""


@pytest.mark.parametrize("needle", ["foo.bar", "foo", "aa", "\n", "def helper():"])
def test_literal_matches_escaped_regex(needle):
    """Literal mode finds the same spans as the regex engine on an escaped pattern."""
    text = SOURCE + "aaaa aaa"
    literal = LiteralTerm(needle).find_all(text)
    regex = PatternTerm(re.compile(re.escape(needle))).find_all(text)
    assert literal == regex


def test_literal_skips_overlapping_occurrences():
    assert LiteralTerm("aa").find_all("aaaaa") == [(0, 2), (2, 4)]


def test_spans_are_ordered_and_disjoint():
    spans = PatternTerm.compile(r"foo\.\w+").find_all(SOURCE)
    assert len(spans) == 4
    for (s1, e1), (s2, e2) in zip(spans, spans[1:]):
        assert e1 <= s2
        assert s1 < s2


def test_literal_offsets_are_absolute():
    text = "xx foo yy foo"
    spans = LiteralTerm("foo").find_all(text)
    assert spans == [(3, 6), (10, 13)]
    assert all(text[s:e] == "foo" for s, e in spans)


def test_no_match_returns_empty():
    assert LiteralTerm("missing").find_all(SOURCE) == []
    assert PatternTerm.compile("missing").find_all(SOURCE) == []


def test_empty_literal_rejected():
    with pytest.raises(InvalidSearchTermError):
        LiteralTerm("")


def test_invalid_regex_rejected():
    with pytest.raises(InvalidSearchTermError, match="Couldn't compile"):
        PatternTerm.compile("foo(")


def test_make_term_variants():
    assert isinstance(make_term("a.b"), LiteralTerm)
    term = make_term(r"a\.b", use_regex=True)
    assert isinstance(term, PatternTerm)
    assert term.text == r"a\.b"


def test_word_bounded_term():
    term = word_bounded("helper")
    assert term.text == r"\bhelper\b"
    text = "helper() my_helper() helpers helper"
    assert [text[s:e] for s, e in term.find_all(text)] == ["helper", "helper"]
    assert term.find_all(text)[0] == (0, 6)
