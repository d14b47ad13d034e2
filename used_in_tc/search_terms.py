"""Search terms: a literal string or a compiled regular expression.

Both variants expose the same capability, :meth:`SearchTerm.find_all`, which
returns every non-overlapping ``(start, end)`` span in document order using
absolute offsets into the searched text.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Pattern, Tuple

Span = Tuple[int, int]


class InvalidSearchTermError(ValueError):
    """Raised when a search term cannot be used for matching."""


class SearchTerm(ABC):
    """Something that can be located inside source text."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Rendered form of the term, used for logging and de-duplication."""
        ...

    @abstractmethod
    def find_all(self, source: str) -> List[Span]:
        ...

    def __str__(self) -> str:
        return self.text


class LiteralTerm(SearchTerm):
    def __init__(self, literal: str) -> None:
        if not literal:
            raise InvalidSearchTermError("Search term must not be empty")
        self._literal = literal

    @property
    def text(self) -> str:
        return self._literal

    def find_all(self, source: str) -> List[Span]:
        spans: List[Span] = []
        size = len(self._literal)
        pos = source.find(self._literal)
        while pos != -1:
            spans.append((pos, pos + size))
            # Continue after the match so overlapping occurrences are skipped
            pos = source.find(self._literal, pos + size)
        return spans

    def __repr__(self) -> str:
        return f"LiteralTerm({self._literal!r})"


class PatternTerm(SearchTerm):
    def __init__(self, pattern: Pattern[str]) -> None:
        self._pattern = pattern

    @classmethod
    def compile(cls, expression: str) -> "PatternTerm":
        if not expression:
            raise InvalidSearchTermError("Search pattern must not be empty")
        try:
            return cls(re.compile(expression))
        except re.error as exc:
            raise InvalidSearchTermError(f"Couldn't compile search pattern {expression!r}: {exc}") from exc

    @property
    def text(self) -> str:
        return self._pattern.pattern

    def find_all(self, source: str) -> List[Span]:
        return [m.span() for m in self._pattern.finditer(source)]

    def __repr__(self) -> str:
        return f"PatternTerm({self._pattern.pattern!r})"


def make_term(pattern: str, use_regex: bool = False) -> SearchTerm:
    """Build a term from user input."""
    if use_regex:
        return PatternTerm.compile(pattern)
    return LiteralTerm(pattern)


def word_bounded(name: str) -> PatternTerm:
    """Term matching *name* as a whole word only."""
    return PatternTerm.compile(rf"\b{name}\b")
