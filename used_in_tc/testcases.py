"""Recognise test case files and extract their metadata."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Pattern, Union

from .config import (
    DEFAULT_FILE_TYPE,
    TC_ESTIMATE_PATTERN,
    TC_ID_PATTERN,
    TC_SETUP_PATTERN,
    TEST_CASES_DIR,
    TEST_FILE_PREFIX,
)
from .models import TestCaseInfo

logger = logging.getLogger(__name__)

_SEP = r"[\\/]"


def _compile_element(expression: str, group: str) -> Pattern[str]:
    try:
        pattern = re.compile(expression)
    except re.error as exc:
        raise ValueError(f"Couldn't compile TC {group} pattern {expression!r}: {exc}") from exc
    if group not in pattern.groupindex:
        raise ValueError(f"TC {group} pattern {expression!r} needs a '{group}' group")
    return pattern


def extract_element(text: str, pattern: Pattern[str], group: str) -> str:
    match = pattern.search(text)
    if match is None:
        return ""
    return match.group(group) or ""


class TestCaseClassifier:
    """Path-based test case detection plus metadata extraction.

    A test case lives somewhere below a ``test_cases`` directory (at least one
    level deep) in a file named ``test_*<suffix>``. Metadata is pulled from
    the file body with three independent patterns; a missing field is logged
    and left empty.
    """

    __test__ = False

    def __init__(
        self,
        directory: str = TEST_CASES_DIR,
        prefix: str = TEST_FILE_PREFIX,
        suffix: str = DEFAULT_FILE_TYPE,
        id_pattern: str = TC_ID_PATTERN,
        setup_pattern: str = TC_SETUP_PATTERN,
        estimate_pattern: str = TC_ESTIMATE_PATTERN,
    ) -> None:
        self.path_pattern = re.compile(
            rf"{re.escape(directory)}{_SEP}.*?{_SEP}{re.escape(prefix)}[^\\/]*{re.escape(suffix)}$"
        )
        self.id_pattern = _compile_element(id_pattern, "id")
        self.setup_pattern = _compile_element(setup_pattern, "setup")
        self.estimate_pattern = _compile_element(estimate_pattern, "estimate")

    def is_test_case(self, path: Union[str, Path]) -> bool:
        return self.path_pattern.search(str(path)) is not None

    def extract_info(self, text: str, path: Union[str, Path]) -> TestCaseInfo:
        identifier = extract_element(text, self.id_pattern, "id")
        if not identifier:
            logger.warning("Couldn't find id for TC %s", path)

        setup = extract_element(text, self.setup_pattern, "setup")
        if not setup:
            logger.warning("Couldn't find setup for TC %s", path)

        estimate = extract_element(text, self.estimate_pattern, "estimate")
        if not estimate:
            logger.warning("Couldn't find estimate for TC %s", path)

        return TestCaseInfo(identifier=identifier, estimate=estimate, setup=setup)
