"""Missing-record report: HTML summary body and local JSON dump."""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import Any, Iterable, Union

logger = logging.getLogger("repartee.report")

_RULE = (
    '<hr style="border: 0; height: 1px; background-image: linear-gradient('
    "to right, rgba(0, 0, 0, 0), rgba(0, 0, 0, 0.75), rgba(0, 0, 0, 0));\" />"
)

_SUMMARY = Template(
    """
$rule
<h3>&#129335;District $district_name CleverID $district_id was missing these Clever IDs:</h3>
<h4>Student Clever IDs</h4>
<ul>
$students</ul>
$rule
<h4>Teacher Clever IDs</h4>
<ul>
$teachers</ul>
$rule
<h4>School Clever IDs</h4>
<ul>
$schools</ul>
$rule
"""
)


@dataclass(frozen=True)
class MissingReport:
    district_name: str
    district_clever_id: str
    missing_student_clever_ids: list[str] = field(default_factory=list)
    missing_teacher_clever_ids: list[str] = field(default_factory=list)
    missing_school_clever_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.missing_student_clever_ids
            or self.missing_teacher_clever_ids
            or self.missing_school_clever_ids
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Field names match the dumps earlier releases wrote."""
        return {
            "DistrictName": self.district_name,
            "DistrictCleverID": self.district_clever_id,
            "MissingStudentCleverIDs": list(self.missing_student_clever_ids),
            "MissingTeacherCleverIDs": list(self.missing_teacher_clever_ids),
            "MissingSchoolCleverIDs": list(self.missing_school_clever_ids),
        }


def _items(ids: Iterable[str]) -> str:
    return "".join(f"  <li>{html.escape(i)}</li>\n" for i in ids)


def render_summary_html(report: MissingReport) -> str:
    """Render the three bulleted sections; every value is HTML-escaped."""
    return _SUMMARY.substitute(
        rule=_RULE,
        district_name=html.escape(report.district_name),
        district_id=html.escape(report.district_clever_id),
        students=_items(report.missing_student_clever_ids),
        teachers=_items(report.missing_teacher_clever_ids),
        schools=_items(report.missing_school_clever_ids),
    )


def write_report_json(report: MissingReport, directory: Union[str, Path] = ".") -> Path:
    """Write ``<district id>.json`` and return its path. OSError propagates."""
    path = Path(directory) / f"{report.district_clever_id}.json"
    path.write_text(json.dumps(report.to_json_dict(), indent=1), encoding="utf-8")
    logger.info("Wrote report to %s", path, extra={"district_id": report.district_clever_id})
    return path
