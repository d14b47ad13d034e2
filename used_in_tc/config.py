"""Default settings and paths for used-in-tc."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("USED_IN_TC_HOME", str(Path.home() / ".used_in_tc"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"
TEMPLATE_FILE = Path(__file__).parent / "templates" / "report_template.xml"

# Search defaults (overridable from config.toml or the command line)
DEFAULT_FILE_TYPE = ".py"
DEFAULT_DEPTH = 6
DEFAULT_WORKERS = 4
DEFAULT_LOG_FILE = "search.log"
DEFAULT_OUT_FILE = "search_tc.xml"

# Files named <name><marker><suffix> are generated code, e.g. protobuf stubs
GENERATED_MARKERS = ["_pb2"]

# Named function definition: keyword, whitespace, identifier, "("
DECLARATION_PATTERN = r"\bdef\s+(?P<name>\w+)\s*\("

# Declarations that end the backward scan without yielding a routine name
IGNORED_ROUTINE_PATTERNS = [r"^test_(\d+)_", r"^__init__$"]

# Test case layout: test_cases/<any>/test_<name><suffix>
TEST_CASES_DIR = "test_cases"
TEST_FILE_PREFIX = "test_"

# Test case metadata (single named group each)
TC_ID_PATTERN = r"Polarion ID: (?P<id>[a-zA-Z0-9]+-\d+)"
TC_SETUP_PATTERN = r"Setup: (?P<setup>.*?)\n"
TC_ESTIMATE_PATTERN = r"Initial estimate: \b(?P<estimate>[0-9:]+)\b"

# Report output
REPORT_PROJECT_ID = "tests"
SCRIPT_URL_TEMPLATE = "{path}"
APPROVED_STATUSES = ["approved"]
