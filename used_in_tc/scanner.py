"""Concurrent repository scanner.

Runs the per-file pipeline (match, context, classification) over every
candidate file using a fixed-size thread pool. The pool is joined before
results are returned, so callers always see a complete set.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional

from .config import DEFAULT_FILE_TYPE, DEFAULT_WORKERS
from .context import extract_context
from .declarations import DeclarationClassifier
from .files import get_files_from_dir
from .models import FileResult, SearchResult, TestCaseInfo
from .search_terms import SearchTerm
from .testcases import TestCaseClassifier

logger = logging.getLogger(__name__)


class RepositoryScanner:
    """Search every file of a repository for a term."""

    def __init__(
        self,
        file_type: str = DEFAULT_FILE_TYPE,
        workers: int = DEFAULT_WORKERS,
        declarations: Optional[DeclarationClassifier] = None,
        test_cases: Optional[TestCaseClassifier] = None,
        generated_markers: Optional[Iterable[str]] = None,
    ) -> None:
        if workers < 1:
            raise ValueError(f"Worker count must be positive, got {workers}")
        self.file_type = file_type
        self.workers = workers
        self.declarations = declarations or DeclarationClassifier()
        self.test_cases = test_cases or TestCaseClassifier(suffix=file_type)
        self.generated_markers = generated_markers

    def scan(self, root: Path, term: SearchTerm) -> List[FileResult]:
        """Return one FileResult per file with at least one match.

        Each file is handled by exactly one worker. Ordering across files is
        not meaningful.
        """
        files = get_files_from_dir(root, self.file_type, self.generated_markers)
        logger.debug("Scanning %d files for %s with %d workers", len(files), term, self.workers)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            found = list(executor.map(lambda path: self.scan_file(path, term), files))

        results = [r for r in found if r is not None]
        logger.debug("%d files matched %s", len(results), term)
        return results

    def scan_file(self, path: Path, term: SearchTerm) -> Optional[FileResult]:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.error("Couldn't read file %s: %s", path, exc)
            return None

        file_path = str(path)
        matches: List[SearchResult] = []
        for start, end in term.find_all(text):
            ctx = extract_context((start, end), text)
            is_declaration = self.declarations.is_declaration(ctx.line_text)
            used_in_method = ""
            # Only look for an enclosing routine when the match is a usage
            if not is_declaration:
                used_in_method = self.declarations.enclosing_routine(text[:start])
            matches.append(
                SearchResult(
                    file_path=file_path,
                    line=ctx.line,
                    col=ctx.col,
                    col_end=ctx.col_end,
                    line_text=ctx.line_text,
                    used_in_method=used_in_method,
                    is_declaration=is_declaration,
                )
            )

        if not matches:
            return None

        is_test_case = self.test_cases.is_test_case(file_path)
        info = self.test_cases.extract_info(text, file_path) if is_test_case else TestCaseInfo()
        return FileResult(
            file_path=file_path,
            matches=matches,
            is_test_case=is_test_case,
            test_case=info,
        )
