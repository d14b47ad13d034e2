"""Core data models shared by the scanner, tracer, and report layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class SearchResult:
    file_path: str
    line: int
    col: int
    col_end: int
    line_text: str
    used_in_method: str = ""
    is_declaration: bool = False

    @property
    def matched_text(self) -> str:
        return self.line_text[self.col:self.col_end]


@dataclass(frozen=True)
class TestCaseInfo:
    """Metadata extracted from a test case file. Missing fields are empty."""

    __test__ = False

    identifier: str = ""
    estimate: str = ""
    setup: str = ""


@dataclass(frozen=True)
class FileResult:
    file_path: str
    matches: List[SearchResult] = field(default_factory=list)
    is_test_case: bool = False
    test_case: TestCaseInfo = field(default_factory=TestCaseInfo)

    @property
    def test_case_id(self) -> str:
        return self.test_case.identifier


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    path: str
    info: TestCaseInfo


# Keyed by test case identifier
TestCasesMap = Dict[str, TestCase]


def format_test_cases(test_cases: TestCasesMap) -> str:
    return "[" + ", ".join(sorted(test_cases)) + "]"
