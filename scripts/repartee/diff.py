"""Identifier diffs between two roster snapshots."""

from __future__ import annotations

from typing import Iterable

from scripts.repartee.models import EntityRecord
from scripts.repartee.roster import Roster


def find_missing(
    present: Iterable[EntityRecord],
    candidates: Iterable[EntityRecord],
) -> list[str]:
    """Ids of ``candidates`` absent from ``present``, in candidate order.

    Repeated candidate ids are reported once per occurrence.
    """
    present_ids = {record.id for record in present}
    return [record.id for record in candidates if record.id not in present_ids]


def find_missing_students(a: Roster, b: Roster) -> list[str]:
    return find_missing(a.students, b.students)


def find_missing_teachers(a: Roster, b: Roster) -> list[str]:
    return find_missing(a.teachers, b.teachers)


def find_missing_schools(a: Roster, b: Roster) -> list[str]:
    return find_missing(a.schools, b.schools)
