"""Lexical detection of routine declarations.

This is a text heuristic, not a parser. The enclosing routine of a match is
the nearest declaration *above* it; indentation and nesting are ignored, so
a usage can be attributed to an unrelated declaration that merely precedes
it in the file.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Pattern

from .config import DECLARATION_PATTERN, IGNORED_ROUTINE_PATTERNS

logger = logging.getLogger(__name__)


def _compile(expression: str, what: str) -> Pattern[str]:
    try:
        return re.compile(expression)
    except re.error as exc:
        raise ValueError(f"Couldn't compile {what} regex {expression!r}: {exc}") from exc


class DeclarationClassifier:
    """Decide whether a line declares a routine and find enclosing routines."""

    def __init__(
        self,
        pattern: str = DECLARATION_PATTERN,
        ignored_routines: Optional[Iterable[str]] = None,
    ) -> None:
        self.pattern = _compile(pattern, "method declaration")
        if "name" not in self.pattern.groupindex:
            raise ValueError(f"Method declaration regex {pattern!r} needs a 'name' group")
        patterns = IGNORED_ROUTINE_PATTERNS if ignored_routines is None else ignored_routines
        self.ignored: List[Pattern[str]] = [_compile(p, "ignored routine") for p in patterns]

    def declared_name(self, line: str) -> str:
        match = self.pattern.search(line)
        if match is None:
            return ""
        return match.group("name") or ""

    def is_declaration(self, line: str) -> bool:
        return self.declared_name(line) != ""

    def is_ignored(self, name: str) -> bool:
        return any(p.search(name) for p in self.ignored)

    def enclosing_routine(self, pretext: str) -> str:
        """Name of the closest declaration in *pretext*, scanning upwards.

        Blank lines are skipped. The scan stops at the first declaration; if
        that one is ignored (formal test methods, constructors) the result is
        empty, as it is when the top of the file is reached.
        """
        for text_line in reversed(pretext.split("\n")):
            if not text_line.strip():
                continue
            name = self.declared_name(text_line)
            if not name:
                continue
            if self.is_ignored(name):
                logger.debug("Ignoring enclosing routine %s", name)
                return ""
            return name
        return ""
