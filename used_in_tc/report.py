"""XML report of the test cases found by a trace.

Test cases are grouped by setup, sorted by estimated duration inside each
group and injected into a template at two placeholder comments.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from xml.sax.saxutils import escape

from .config import (
    APPROVED_STATUSES,
    REPORT_PROJECT_ID,
    SCRIPT_URL_TEMPLATE,
    TEMPLATE_FILE,
    TEST_CASES_DIR,
)
from .models import TestCase, TestCasesMap
from .work_items import WorkItems

logger = logging.getLogger(__name__)

RESULTS_PLACEHOLDER = "<!-- REPLACE WITH RESULTS-->"
SEARCH_PATTERN_PLACEHOLDER = "<!-- REPLACE WITH SEARCH PATTERN-->"
SEARCH_PATTERN_TEMPLATE = "<!-- SEARCH: {} -->"
PROTOCOL_TEMPLATE = '<protocol project-id="{project_id}" id="{id}"> <!-- {info} -->\n\t{reference}\n</protocol>'
SCRIPT_REFERENCE_TEMPLATE = "<test-script-reference>{}</test-script-reference>"
TIMESTAMP_FORMAT = "%Y_%m_%d__%H_%M_%S"


def _comment_safe(text: str) -> str:
    # "--" is not allowed inside XML comments
    return text.replace("--", "- -")


def setup_key(setup: str) -> str:
    words = setup.strip().split()
    return words[0].lower() if words else ""


def group_by_setup(test_cases: TestCasesMap) -> Dict[str, TestCasesMap]:
    groups: Dict[str, TestCasesMap] = {}
    for tc_id, tc in test_cases.items():
        groups.setdefault(setup_key(tc.info.setup), {})[tc_id] = tc
    return groups


def duration_seconds(estimate: str) -> int:
    """Seconds for a colon separated estimate (``"1:30"`` is 90); 0 if unparsable."""
    total = 0
    for part in estimate.strip().split(":"):
        if not part.isdigit():
            return 0
        total = total * 60 + int(part)
    return total


def script_path(path: str, directory: str = TEST_CASES_DIR) -> str:
    """Path of a test script starting at the test cases directory, with '/' separators."""
    normalized = path.replace("\\", "/")
    marker = f"{directory}/"
    idx = normalized.find(marker)
    if idx == -1:
        raise ValueError(f"Couldn't find '{marker}' in path: {path}")
    return normalized[idx:]


def protocol(
    test_case: TestCase,
    project_id: str = REPORT_PROJECT_ID,
    script_url: str = SCRIPT_URL_TEMPLATE,
    directory: str = TEST_CASES_DIR,
) -> str:
    url = script_url.format(path=script_path(test_case.path, directory))
    info = f"Duration: {test_case.info.estimate}; Setup: {test_case.info.setup}"
    return PROTOCOL_TEMPLATE.format(
        project_id=escape(project_id, {'"': "&quot;"}),
        id=escape(test_case.info.identifier, {'"': "&quot;"}),
        info=_comment_safe(info),
        reference=SCRIPT_REFERENCE_TEMPLATE.format(escape(url)),
    )


def _sorted_by_duration(test_cases: TestCasesMap) -> List[TestCase]:
    return sorted(
        test_cases.values(),
        key=lambda tc: (duration_seconds(tc.info.estimate), tc.info.identifier),
    )


def render_protocols(
    test_cases: TestCasesMap,
    work_items: Optional[WorkItems] = None,
    approved_statuses: Iterable[str] = APPROVED_STATUSES,
    **protocol_options: str,
) -> str:
    statuses = list(approved_statuses)
    out = ""
    for setup, tests in sorted(group_by_setup(test_cases).items()):
        out += f"\n<!-- {_comment_safe(setup)} -->\n"
        if work_items is None:
            sections = [("", tests)]
        else:
            approved = {
                k: v for k, v in tests.items() if k in work_items and work_items[k].is_approved(statuses)
            }
            not_approved = {k: v for k, v in tests.items() if k not in approved}
            sections = [("approved", approved), ("not approved", not_approved)]

        for title, section in sections:
            if title:
                if not section:
                    continue
                out += f"<!-- {title} -->\n"
            for tc in _sorted_by_duration(section):
                out += protocol(tc, **protocol_options) + "\n"
    return out


def render_report(
    template: str,
    search_pattern: str,
    test_cases: TestCasesMap,
    work_items: Optional[WorkItems] = None,
    approved_statuses: Iterable[str] = APPROVED_STATUSES,
    **protocol_options: str,
) -> str:
    if RESULTS_PLACEHOLDER not in template:
        logger.warning("Template has no results placeholder %s", RESULTS_PLACEHOLDER)
    protocols = render_protocols(test_cases, work_items, approved_statuses, **protocol_options)
    out = template.replace(RESULTS_PLACEHOLDER, protocols, 1)
    return out.replace(
        SEARCH_PATTERN_PLACEHOLDER,
        SEARCH_PATTERN_TEMPLATE.format(_comment_safe(search_pattern)),
        1,
    )


def timestamped_filename(path: Path, now: Optional[datetime] = None, default_ext: str = ".xml") -> Path:
    """``out.xml`` -> ``out_2024_01_31__12_00_00.xml``."""
    path = Path(path)
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    ext = path.suffix or default_ext
    return path.with_name(f"{path.stem}_{stamp}{ext}")


def load_template(path: Optional[Path] = None) -> str:
    return Path(path or TEMPLATE_FILE).read_text(encoding="utf-8")


def write_report(
    out_path: Path,
    search_pattern: str,
    test_cases: TestCasesMap,
    template: Optional[str] = None,
    work_items: Optional[WorkItems] = None,
    approved_statuses: Iterable[str] = APPROVED_STATUSES,
    now: Optional[datetime] = None,
    **protocol_options: str,
) -> Path:
    """Render the report and write it next to *out_path* with a timestamp."""
    content = render_report(
        template if template is not None else load_template(),
        search_pattern,
        test_cases,
        work_items,
        approved_statuses,
        **protocol_options,
    )
    out_file = timestamped_filename(out_path, now)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(content, encoding="utf-8")
    logger.debug("Wrote report %s", out_file)
    return out_file
