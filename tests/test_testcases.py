"""Tests for test case classification and metadata extraction."""

import logging

import pytest

from used_in_tc.models import TestCaseInfo
from used_in_tc.testcases import TestCaseClassifier


@pytest.fixture
def classifier():
    return TestCaseClassifier()


@pytest.mark.parametrize(
    "path, expected",
    [
        ("repo/test_cases/heating/test_power.py", True),
        ("test_cases/a/b/test_deep.py", True),
        (r"C:\repo\test_cases\heating\test_power.py", True),
        ("repo/test_cases/test_top_level.py", False),
        ("repo/test_cases/heating/helpers.py", False),
        ("repo/tests/heating/test_power.py", False),
        ("repo/test_cases/heating/test_power.pyc", False),
    ],
)
def test_is_test_case(classifier, path, expected):
    assert classifier.is_test_case(path) is expected


def test_custom_layout():
    classifier = TestCaseClassifier(directory="specs", prefix="spec_", suffix=".js")
    assert classifier.is_test_case("web/specs/login/spec_login.js")
    assert not classifier.is_test_case("web/test_cases/login/test_login.py")


def test_extract_info(classifier, tc_source):
    text = tc_source("PRJ-42", "def test_001(self):\n    pass\n", setup="Bench A big", estimate="1:30")
    info = classifier.extract_info(text, "test_cases/x/test_a.py")
    assert info == TestCaseInfo(identifier="PRJ-42", estimate="1:30", setup="Bench A big")


def test_extract_info_missing_fields_are_empty(classifier, caplog):
    with caplog.at_level(logging.WARNING, logger="used_in_tc"):
        info = classifier.extract_info("Polarion ID: PRJ-7\n", "test_cases/x/test_a.py")

    assert info.identifier == "PRJ-7"
    assert info.setup == ""
    assert info.estimate == ""
    assert "setup" in caplog.text
    assert "estimate" in caplog.text


def test_identifier_shape_enforced(classifier):
    info = classifier.extract_info("Polarion ID: not-an-id\n", "test_cases/x/test_a.py")
    assert info.identifier == ""


def test_invalid_metadata_pattern():
    with pytest.raises(ValueError, match="id"):
        TestCaseClassifier(id_pattern=r"ID: (\w+)")
