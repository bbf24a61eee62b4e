"""Cursor pagination over Clever list endpoints.

Each page is ``{"data": [{"data": {...}}, ...], "links": [{"rel", "uri"}, ...]}``.
The ``next`` link carries a ``starting_after`` query parameter; the loop
follows it until a page arrives without one.
"""

from __future__ import annotations

import json
import logging
import time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, TypeVar
from urllib.parse import parse_qs, urlsplit

import requests

from scripts.repartee.errors import FetchError
from scripts.repartee.models import EntityRecord, ListEnvelope

if TYPE_CHECKING:
    from scripts.repartee.client import CleverClient

logger = logging.getLogger("repartee.pagination")

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 1000


def is_http_success(code: int) -> bool:
    return 200 <= code <= 299


def decode_json(resp: requests.Response) -> dict[str, Any]:
    """Decode a JSON body keeping non-integer numbers as Decimal."""
    body = json.loads(resp.content or b"{}", parse_float=Decimal)
    if not isinstance(body, dict):
        raise ValueError(f"expected a JSON object, got {type(body).__name__}")
    return body


def parse_starting_after(uri: str) -> str:
    """Extract the ``starting_after`` cursor from a link URI ("" if absent)."""
    try:
        query = urlsplit(uri).query
    except ValueError:
        return ""
    values = parse_qs(query).get("starting_after")
    return values[0] if values else ""


def unwrap_with(record_type: type[EntityRecord]) -> Callable[[Mapping[str, Any]], EntityRecord]:
    """Build an unwrap step turning ``{"data": {...}}`` into ``record_type``."""

    def unwrap(item: Mapping[str, Any]) -> EntityRecord:
        return record_type.from_payload(item.get("data") or {})

    return unwrap


def _fetch_page(
    client: "CleverClient",
    collection: str,
    limit: Optional[int],
    cursor: Optional[str],
) -> ListEnvelope:
    resp = client.list(collection, limit=limit, starting_after=cursor)
    if not is_http_success(resp.status_code):
        resp.close()
        raise FetchError(collection, resp.status_code, cursor)
    try:
        return ListEnvelope.from_json(decode_json(resp))
    except (ValueError, AttributeError, TypeError) as exc:
        raise FetchError(
            collection, resp.status_code, cursor, reason=f"undecodable page: {exc}"
        ) from exc


def _unwrap_page(
    collection: str,
    envelope: ListEnvelope,
    unwrap: Callable[[Mapping[str, Any]], T],
    cursor: Optional[str],
) -> list[T]:
    try:
        return [unwrap(item) for item in envelope.data]
    except (ValueError, AttributeError) as exc:
        raise FetchError(collection, 200, cursor, reason=f"malformed record: {exc}") from exc


def fetch_all(
    client: "CleverClient",
    collection: str,
    unwrap: Callable[[Mapping[str, Any]], T],
    limit: int = DEFAULT_PAGE_LIMIT,
) -> list[T]:
    """Drain a paginated collection into one list, in page order.

    Any non-2xx page raises FetchError and nothing collected so far is
    returned. Transport failures propagate unchanged.
    """
    results: list[T] = []
    cursor: Optional[str] = None
    pages = 0
    begin = time.monotonic()

    while True:
        envelope = _fetch_page(client, collection, limit, cursor)
        pages += 1
        results.extend(_unwrap_page(collection, envelope, unwrap, cursor))

        link = envelope.next_link()
        if link is None:
            break
        cursor = parse_starting_after(link.uri)

    logger.info(
        "Fetched %s (%d page(s))",
        collection,
        pages,
        extra={
            "entity_type": collection,
            "records": len(results),
            "duration_s": round(time.monotonic() - begin, 3),
        },
    )
    return results


def fetch_one_page(
    client: "CleverClient",
    collection: str,
    unwrap: Callable[[Mapping[str, Any]], T],
) -> list[T]:
    """Fetch an unpaginated collection (districts) with a single request."""
    envelope = _fetch_page(client, collection, None, None)
    results = _unwrap_page(collection, envelope, unwrap, None)
    logger.info(
        "Fetched %s",
        collection,
        extra={"entity_type": collection, "records": len(results)},
    )
    return results
