"""Tests for the Polarion work items import."""

import pytest

from used_in_tc.work_items import (
    WorkItem,
    WorkItemsError,
    format_work_items,
    load_work_items,
    parse_work_items,
)


def test_load_export(work_items_path):
    items = load_work_items(work_items_path)

    assert sorted(items) == ["PRJ-101", "PRJ-102"]
    first = items["PRJ-101"]
    assert first.title == "Power cycle the heater"
    assert first.status == "approved"
    assert first.risk_reduction_measures == ["RRM-1", "RRM-2"]
    assert items["PRJ-102"].risk_reduction_measures == []


def test_format(work_items_path):
    text = format_work_items(load_work_items(work_items_path))
    assert "PRJ-101,Power cycle the heater,approved,RRM-1, RRM-2\n" in text
    assert "PRJ-102,Restart the device,draft,\n" in text


def test_valid_and_approved():
    item = WorkItem(id="PRJ-1", title="t", status="Approved")
    assert item.valid()
    assert item.is_approved(["approved"])
    assert not item.is_approved(["reviewed"])
    assert not WorkItem(id="PRJ-1", title="", status="draft").valid()


def test_items_without_id_are_skipped():
    items = parse_work_items(
        "<workItems><workItem><fields><title>x</title></fields></workItem></workItems>"
    )
    assert items == {}


def test_missing_status():
    items = parse_work_items(
        "<workItems><workItem><fields><id>A-1</id><title>x</title></fields></workItem></workItems>"
    )
    assert items["A-1"].status == ""
    assert not items["A-1"].valid()


def test_malformed_export():
    with pytest.raises(WorkItemsError):
        parse_work_items("<workItems><workItem>")


def test_missing_file(temp_dir):
    with pytest.raises(WorkItemsError):
        load_work_items(temp_dir / "missing.xml")
