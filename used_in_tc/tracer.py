"""Depth-bounded recursive usage tracing.

A round scans the repository for one term. Matches inside test case files
are committed directly. For every other match the enclosing routine is
looked up and the search continues with that routine's name, one level
shallower, until a test case is hit or the depth budget runs out.

A round whose term hits more than one routine declaration is discarded:
the name no longer identifies a single routine, so anything found through
it could belong to an unrelated call graph.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

from .config import DEFAULT_DEPTH
from .models import FileResult, TestCase, TestCasesMap
from .scanner import RepositoryScanner
from .search_terms import SearchTerm, word_bounded

logger = logging.getLogger(__name__)

ResultCallback = Callable[[FileResult], None]


class RoundDecision(enum.Enum):
    NO_DECLARATIONS = "no_declarations"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class RoundClassification:
    decision: RoundDecision
    results: Tuple[FileResult, ...] = ()
    declarations: int = 0


@dataclass
class TraversalState:
    """Terms already issued during one top-level trace."""

    searched: Set[str] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def claim(self, term: str) -> bool:
        """Record *term*; return False if it was already recorded."""
        with self._lock:
            if term in self.searched:
                return False
            self.searched.add(term)
            return True

    def __contains__(self, term: object) -> bool:
        with self._lock:
            return term in self.searched


def classify_round(results: List[FileResult]) -> RoundClassification:
    """Drop declaration matches and decide whether the round is usable.

    Declarations are counted across the whole round. More than one means the
    term is ambiguous and no results are kept. Files left without matches are
    dropped.
    """
    declarations = 0
    kept: List[FileResult] = []
    for result in results:
        usages = [m for m in result.matches if not m.is_declaration]
        declarations += len(result.matches) - len(usages)
        if declarations > 1:
            return RoundClassification(RoundDecision.AMBIGUOUS, declarations=declarations)
        if usages:
            kept.append(replace(result, matches=usages))

    decision = RoundDecision.UNIQUE if declarations == 1 else RoundDecision.NO_DECLARATIONS
    return RoundClassification(decision, tuple(kept), declarations)


class UsageTracer:
    """Find test cases that reach a term through chains of routine calls."""

    def __init__(
        self,
        root: Path,
        scanner: Optional[RepositoryScanner] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> None:
        self.root = Path(root)
        self.scanner = scanner or RepositoryScanner()
        self.on_result = on_result

    def trace(
        self,
        term: SearchTerm,
        depth: int = DEFAULT_DEPTH,
        state: Optional[TraversalState] = None,
    ) -> TestCasesMap:
        """Return the test cases using *term*, at most *depth* rounds away."""
        if depth <= 0:
            return {}
        if state is None:
            state = TraversalState()

        logger.info("Searching for %s (depth %d)", term, depth)
        classification = classify_round(self.scanner.scan(self.root, term))
        if classification.decision is RoundDecision.AMBIGUOUS:
            logger.warning(
                "Found multiple method declarations for %s. Discarding TC results", term
            )
            return {}

        test_cases: TestCasesMap = {}
        non_tc_matches: List[FileResult] = []
        for result in classification.results:
            if self.on_result is not None:
                self.on_result(result)
            if result.test_case_id:
                test_cases[result.test_case_id] = TestCase(path=result.file_path, info=result.test_case)
            else:
                non_tc_matches.append(result)

        logger.info(
            "%s: %d test case files, %d non TC files",
            term,
            len(test_cases),
            len(non_tc_matches),
        )
        test_cases.update(self._expand(term, non_tc_matches, depth, state))
        return test_cases

    def _expand(
        self,
        term: SearchTerm,
        non_tc_matches: List[FileResult],
        depth: int,
        state: TraversalState,
    ) -> TestCasesMap:
        found: TestCasesMap = {}
        for file_result in non_tc_matches:
            for match in file_result.matches:
                if not match.used_in_method:
                    logger.warning(
                        "No containing method found for match:\n%s\n%d: %s",
                        match.file_path,
                        match.line,
                        match.line_text,
                    )
                    continue

                # Claimed even with no depth left; trace() stops at depth 0
                new_term = word_bounded(match.used_in_method)
                if not state.claim(new_term.text):
                    continue

                logger.info("Extending search for %s by %s", term, new_term)
                found.update(self.trace(new_term, depth - 1, state))
        return found


def trace_usages(
    root: Path,
    term: SearchTerm,
    depth: int = DEFAULT_DEPTH,
    scanner: Optional[RepositoryScanner] = None,
    on_result: Optional[ResultCallback] = None,
) -> TestCasesMap:
    """Run a complete trace with a fresh traversal state."""
    return UsageTracer(root, scanner=scanner, on_result=on_result).trace(term, depth, TraversalState())
