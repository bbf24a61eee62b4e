"""Tests for the district token exchange and client construction."""

from unittest.mock import MagicMock

import pytest

from scripts.repartee.auth import get_district_token
from scripts.repartee.client import CleverClient, get_clever_client
from scripts.repartee.config import CleverCredentials
from scripts.repartee.errors import AuthError

pytestmark = pytest.mark.unit

CREDS = CleverCredentials(client_id="cid", client_secret="csecret")


def _token_body(*tokens):
    return {
        "data": [
            {"id": f"tok{i}", "owner": {"type": "district", "id": "d1"}, "access_token": t}
            for i, t in enumerate(tokens)
        ]
    }


class TestGetDistrictToken:
    def test_returns_first_token(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response(body=_token_body("first", "second"))

        assert get_district_token(transport, CREDS, "d1") == "first"

        args, kwargs = transport.get.call_args
        assert args[0] == "https://clever.com/oauth/tokens"
        assert kwargs["params"] == {"owner_type": "district", "district": "d1"}
        assert kwargs["auth"] == ("cid", "csecret")

    def test_error_status(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response(status_code=401)
        with pytest.raises(AuthError, match="HTTP 401"):
            get_district_token(transport, CREDS, "d1")

    def test_empty_token_list(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response(body={"data": []})
        with pytest.raises(AuthError, match="No accelerator access token"):
            get_district_token(transport, CREDS, "d1")

    def test_error_status_closes_response(self, make_response):
        resp = make_response(status_code=503)
        resp.close = MagicMock(wraps=resp.close)
        transport = MagicMock()
        transport.get.return_value = resp
        with pytest.raises(AuthError):
            get_district_token(transport, CREDS, "d1")
        resp.close.assert_called_once()

    @pytest.mark.parametrize(
        "body",
        [
            {"data": {"access_token": "x"}},
            {"data": ["tok"]},
            {"data": "tok"},
            {"data": [{"access_token": "ok"}, 7]},
        ],
        ids=["data-object", "list-of-strings", "data-string", "mixed-list"],
    )
    def test_unexpected_data_shape(self, make_response, body):
        """A token list of the wrong shape is an AuthError, not a raw lookup error."""
        transport = MagicMock()
        transport.get.return_value = make_response(body=body)
        with pytest.raises(AuthError, match="Malformed token response"):
            get_district_token(transport, CREDS, "d1")

    def test_malformed_body(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response(raw=b"not json")
        with pytest.raises(AuthError, match="Malformed"):
            get_district_token(transport, CREDS, "d1")


class TestCleverClient:
    def test_list_sends_bearer_and_params(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response()
        client = CleverClient(transport, "tok", "https://api.clever.com/v2.1/")

        client.list("students", limit=1000, starting_after="abc")

        args, kwargs = transport.get.call_args
        assert args[0] == "https://api.clever.com/v2.1/students"
        assert kwargs["params"] == {"limit": "1000", "starting_after": "abc"}
        assert kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_list_without_pagination_params(self, make_response):
        transport = MagicMock()
        transport.get.return_value = make_response()
        CleverClient(transport, "tok").list("districts")
        _, kwargs = transport.get.call_args
        assert kwargs["params"] == {}

    def test_get_clever_client_uses_token(self, make_response):
        transport = MagicMock()
        transport.get.side_effect = [make_response(body=_token_body("t-1")), make_response()]

        client = get_clever_client(transport, "d1", CREDS)
        client.list("schools", limit=5)

        _, kwargs = transport.get.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer t-1"
