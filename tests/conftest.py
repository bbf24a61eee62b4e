"""Pytest configuration and fixtures for the roster diff tests."""

import io
import json
from typing import Any, Optional

import pytest
import requests


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")


def _make_response(
    status_code: int = 200,
    body: Any = None,
    url: str = "https://api.clever.com/v2.1/students",
    raw: Optional[bytes] = None,
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = url
    resp.headers["Content-Type"] = "application/json"
    if raw is not None:
        resp._content = raw
    else:
        resp._content = json.dumps(body if body is not None else {}).encode("utf-8")
    # Mirror a fully read body so close() releases a real raw stream
    resp._content_consumed = True
    resp.raw = io.BytesIO(resp._content)
    return resp


@pytest.fixture
def make_response():
    """Factory for canned requests.Response objects."""
    return _make_response


def page(ids, next_cursor=None, collection="students"):
    """Build a Clever list envelope with optional next link."""
    body = {"data": [{"data": {"id": i, "name": f"name-{i}"}} for i in ids], "links": []}
    body["links"].append({"rel": "self", "uri": f"/v2.1/{collection}?limit=2"})
    if next_cursor is not None:
        body["links"].append(
            {"rel": "next", "uri": f"/v2.1/{collection}?limit=2&starting_after={next_cursor}"}
        )
    return body


@pytest.fixture
def make_page():
    return page


class FakeClient:
    """Stands in for CleverClient, serving queued responses per collection."""

    def __init__(self, responses: dict):
        self._responses = {k: list(v) for k, v in responses.items()}
        self.calls: list[tuple] = []

    def list(self, collection, limit=None, starting_after=None):
        self.calls.append((collection, limit, starting_after))
        queue = self._responses.get(collection)
        if not queue:
            raise AssertionError(f"unexpected request for {collection}")
        return queue.pop(0)


@pytest.fixture
def fake_client_factory():
    return FakeClient


@pytest.fixture
def clever_env(monkeypatch):
    """Populate both Clever credential pairs and the mail settings."""
    monkeypatch.setattr("scripts.repartee.config.load_dotenv", lambda: None)
    env = {
        "CLEVER_ID": "acc-id",
        "CLEVER_SECRET": "acc-secret",
        "MAP_CLEVER_ID": "map-id",
        "MAP_CLEVER_SECRET": "map-secret",
        "FROM_EMAIL": "reports@example.com",
        "TO_EMAIL": "team@example.com",
        "GMAIL_PASSWORD": "app-password",
    }
    for key, val in env.items():
        monkeypatch.setenv(key, val)
    return env


@pytest.fixture
def empty_env(monkeypatch):
    """Remove every credential variable and disable .env loading."""
    monkeypatch.setattr("scripts.repartee.config.load_dotenv", lambda: None)
    for key in (
        "CLEVER_ID", "CLEVER_SECRET", "MAP_CLEVER_ID", "MAP_CLEVER_SECRET",
        "FROM_EMAIL", "TO_EMAIL", "GMAIL_PASSWORD", "SMTP_HOST", "SMTP_PORT",
    ):
        monkeypatch.delenv(key, raising=False)
