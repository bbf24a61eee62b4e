"""Clever entity records and list-response envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class EntityRecord:
    """A Clever object: its id plus every other attribute, untouched."""

    id: str
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EntityRecord":
        raw_id = payload.get("id")
        if raw_id is None:
            raise ValueError(f"{cls.__name__} payload has no id")
        return cls(id=str(raw_id), attributes=dict(payload))


class District(EntityRecord):
    @property
    def name(self) -> Optional[str]:
        return self.attributes.get("name")


class School(EntityRecord):
    pass


class Student(EntityRecord):
    pass


class Teacher(EntityRecord):
    pass


class DistrictAdmin(EntityRecord):
    pass


class SchoolAdmin(EntityRecord):
    pass


class Section(EntityRecord):
    pass


@dataclass(frozen=True)
class Link:
    rel: str
    uri: str


@dataclass(frozen=True)
class ListEnvelope:
    """One decoded page: wrapped records plus navigation links."""

    data: tuple[Mapping[str, Any], ...] = ()
    links: tuple[Link, ...] = ()

    @classmethod
    def from_json(cls, body: Mapping[str, Any]) -> "ListEnvelope":
        data = tuple(body.get("data") or ())
        links = tuple(
            Link(rel=str(item.get("rel", "")), uri=str(item.get("uri", "")))
            for item in body.get("links") or ()
        )
        return cls(data=data, links=links)

    def next_link(self) -> Optional[Link]:
        for link in self.links:
            if link.rel == "next":
                return link
        return None


# collection path -> record type, in the order a roster is fetched
ENTITY_TYPES: dict[str, type[EntityRecord]] = {
    "districts": District,
    "schools": School,
    "students": Student,
    "teachers": Teacher,
    "district_admins": DistrictAdmin,
    "school_admins": SchoolAdmin,
    "sections": Section,
}
