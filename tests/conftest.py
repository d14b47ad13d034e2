"""Pytest configuration and fixtures for used-in-tc tests."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

from used_in_tc.logging_setup import PACKAGE_LOGGER

# The sample repository contains test_*.py files that are data, not tests
collect_ignore_glob = ["fixtures/*"]


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo handlers installed by setup_logging() during a test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Never pick up a config.toml from the real home directory."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr("used_in_tc.config.CONFIG_FILE", home / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_repo_path() -> Path:
    """Path to the sample repository with library code and test cases."""
    return Path(__file__).parent / "fixtures" / "sample_repo"


@pytest.fixture
def work_items_path() -> Path:
    return Path(__file__).parent / "fixtures" / "work_items.xml"


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: content}`` below a fresh directory and return it."""

    def _make(files: Dict[str, str]) -> Path:
        root = temp_dir / "repo"
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def tc_source() -> Callable[..., str]:
    """Source of a test case file carrying id, setup, and estimate."""

    def _source(tc_id: str, body: str, setup: str = "Bench A", estimate: str = "10") -> str:
        return (
            '"""\n'
            f"Polarion ID: {tc_id}\n"
            f"Setup: {setup}\n"
            f"Initial estimate: {estimate}\n"
            '"""\n'
            f"{body}"
        )

    return _source
