"""Roster snapshots: every entity collection for one district and one app."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scripts.repartee.client import CleverClient
from scripts.repartee.models import (
    ENTITY_TYPES,
    District,
    DistrictAdmin,
    School,
    SchoolAdmin,
    Section,
    Student,
    Teacher,
)
from scripts.repartee.pagination import DEFAULT_PAGE_LIMIT, fetch_all, fetch_one_page, unwrap_with

logger = logging.getLogger("repartee.roster")


@dataclass(frozen=True)
class Roster:
    districts: tuple[District, ...] = ()
    schools: tuple[School, ...] = ()
    students: tuple[Student, ...] = ()
    teachers: tuple[Teacher, ...] = ()
    district_admins: tuple[DistrictAdmin, ...] = ()
    school_admins: tuple[SchoolAdmin, ...] = ()
    sections: tuple[Section, ...] = ()

    @property
    def district_name(self) -> Optional[str]:
        """Name of the last district that has one."""
        name = None
        for district in self.districts:
            if district.name:
                name = district.name
        return name

    def counts(self) -> dict[str, int]:
        return {collection: len(getattr(self, collection)) for collection in ENTITY_TYPES}


def get_roster(client: CleverClient, limit: int = DEFAULT_PAGE_LIMIT) -> Roster:
    """Fetch every collection in turn; any failure aborts the whole roster."""
    collected = {}
    for collection, record_type in ENTITY_TYPES.items():
        unwrap = unwrap_with(record_type)
        if collection == "districts":
            records = fetch_one_page(client, collection, unwrap)
        else:
            records = fetch_all(client, collection, unwrap, limit)
        collected[collection] = tuple(records)

    roster = Roster(**collected)
    logger.info("Roster complete: %s", roster.counts())
    return roster
