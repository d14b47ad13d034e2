"""Import of Polarion work-item XML exports."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)

RISK_REDUCTION_FIELD = "riskreductionmeasure"


class WorkItemsError(ValueError):
    """Raised when a work-item export cannot be read or parsed."""


@dataclass
class WorkItem:
    id: str
    title: str
    status: str
    risk_reduction_measures: List[str] = field(default_factory=list)

    def valid(self) -> bool:
        return bool(self.id and self.title and self.status)

    def is_approved(self, statuses: Iterable[str]) -> bool:
        return self.status.lower() in {s.lower() for s in statuses}

    def __str__(self) -> str:
        return f"{self.id},{self.title},{self.status},{', '.join(self.risk_reduction_measures)}"


WorkItems = Dict[str, WorkItem]


def _text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _risk_reduction_measures(item: ET.Element) -> List[str]:
    measures: List[str] = []
    for prop in item.findall("customFields/field"):
        if prop.get("id") != RISK_REDUCTION_FIELD:
            continue
        measures.extend(opt.get("name", "") for opt in prop.findall("multi-enum/option"))
    return measures


def parse_work_items(xml_text: str) -> WorkItems:
    """Convert a ``<workItems>`` document into items keyed by id."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise WorkItemsError(f"Failed to parse work items: {exc}") from exc

    items: WorkItems = {}
    for element in root.iter("workItem"):
        fields = element.find("fields")
        if fields is None:
            logger.warning("Skipping work item without fields")
            continue
        status = fields.find("status")
        item = WorkItem(
            id=_text(fields, "id"),
            title=_text(fields, "title"),
            status=status.get("name", "") if status is not None else "",
            risk_reduction_measures=_risk_reduction_measures(element),
        )
        if not item.id:
            logger.warning("Skipping work item without id: %s", item.title)
            continue
        items[item.id] = item
    return items


def load_work_items(path: Path) -> WorkItems:
    try:
        xml_text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkItemsError(f"Failed to read work items file {path}: {exc}") from exc
    return parse_work_items(xml_text)


def format_work_items(items: WorkItems) -> str:
    return "".join(f"{item}\n" for item in items.values())
