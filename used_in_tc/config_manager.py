"""Settings loaded from a TOML file on top of the built-in defaults.

Example ``config.toml``::

    [search]
    file_type = ".py"
    depth = 4
    workers = 8

    [testcases]
    directory = "test_cases"
    id_pattern = 'Polarion ID: (?P<id>[A-Z]+-\\d+)'

    [report]
    project_id = "MyProject"
    script_url = "https://svn.example.com/repo/{path}"
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from . import config
from .declarations import DeclarationClassifier
from .scanner import RepositoryScanner
from .testcases import TestCaseClassifier


class ConfigError(ValueError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class Settings:
    # [search]
    file_type: str = config.DEFAULT_FILE_TYPE
    depth: int = config.DEFAULT_DEPTH
    workers: int = config.DEFAULT_WORKERS
    log_file: str = config.DEFAULT_LOG_FILE
    out_file: str = config.DEFAULT_OUT_FILE
    generated_markers: List[str] = field(default_factory=lambda: list(config.GENERATED_MARKERS))
    declaration_pattern: str = config.DECLARATION_PATTERN
    ignored_routines: List[str] = field(default_factory=lambda: list(config.IGNORED_ROUTINE_PATTERNS))
    # [testcases]
    directory: str = config.TEST_CASES_DIR
    prefix: str = config.TEST_FILE_PREFIX
    id_pattern: str = config.TC_ID_PATTERN
    setup_pattern: str = config.TC_SETUP_PATTERN
    estimate_pattern: str = config.TC_ESTIMATE_PATTERN
    # [report]
    project_id: str = config.REPORT_PROJECT_ID
    script_url: str = config.SCRIPT_URL_TEMPLATE
    approved_statuses: List[str] = field(default_factory=lambda: list(config.APPROVED_STATUSES))
    template: Optional[str] = None

    def declaration_classifier(self) -> DeclarationClassifier:
        return DeclarationClassifier(self.declaration_pattern, self.ignored_routines)

    def test_case_classifier(self, file_type: Optional[str] = None) -> TestCaseClassifier:
        return TestCaseClassifier(
            directory=self.directory,
            prefix=self.prefix,
            suffix=file_type or self.file_type,
            id_pattern=self.id_pattern,
            setup_pattern=self.setup_pattern,
            estimate_pattern=self.estimate_pattern,
        )

    def scanner(self, file_type: Optional[str] = None, workers: Optional[int] = None) -> RepositoryScanner:
        suffix = file_type or self.file_type
        return RepositoryScanner(
            file_type=suffix,
            workers=workers or self.workers,
            declarations=self.declaration_classifier(),
            test_cases=self.test_case_classifier(suffix),
            generated_markers=self.generated_markers,
        )


SECTIONS = ("search", "testcases", "report")


def settings_from_dict(payload: Dict[str, Any]) -> Settings:
    """Flatten the known sections into a :class:`Settings`; unknown keys are ignored."""
    known = {f.name for f in fields(Settings)}
    values: Dict[str, Any] = {}
    for section in SECTIONS:
        table = payload.get(section, {})
        if not isinstance(table, dict):
            raise ConfigError(f"[{section}] must be a table")
        values.update({k: v for k, v in table.items() if k in known})
    return Settings(**values)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from *path* (default ``~/.used_in_tc/config.toml``).

    A missing file yields the defaults.
    """
    config_path = Path(path) if path is not None else config.CONFIG_FILE
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        return Settings()

    try:
        payload = toml.load(str(config_path))
    except (toml.TomlDecodeError, OSError) as exc:
        raise ConfigError(f"Couldn't load config {config_path}: {exc}") from exc
    return settings_from_dict(payload)
