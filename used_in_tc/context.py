"""Recover the source line surrounding a match."""

from __future__ import annotations

from dataclasses import dataclass

from .search_terms import Span


@dataclass(frozen=True)
class MatchContext:
    line: int
    col: int
    col_end: int
    line_text: str


def extract_context(span: Span, text: str) -> MatchContext:
    """Locate *span* inside *text*.

    ``line`` is 1-based. ``line_text`` runs from the newline before the match
    to the newline after it, both excluded; a missing newline means the start
    or end of the buffer. Columns are relative to the start of ``line_text``.
    """
    start, end = span
    line = text.count("\n", 0, start) + 1

    left = text.rfind("\n", 0, start)
    right = text.find("\n", end)
    if right == -1:
        right = len(text)

    line_start = left + 1
    return MatchContext(
        line=line,
        col=start - line_start,
        col_end=end - line_start,
        line_text=text[line_start:right],
    )
