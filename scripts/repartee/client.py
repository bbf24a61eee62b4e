"""Bearer-authenticated access to Clever v2.1 list endpoints."""

from __future__ import annotations

from typing import Optional

import requests

from scripts.repartee.auth import get_district_token
from scripts.repartee.config import ApiConfig, CleverCredentials
from scripts.repartee.transport import RetryingTransport


class CleverClient:
    """Issues single list requests; pagination lives in scripts.repartee.pagination."""

    def __init__(
        self,
        transport: RetryingTransport,
        token: str,
        base_url: str = ApiConfig.base_url,
    ) -> None:
        self._transport = transport
        self._base = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    def list(
        self,
        collection: str,
        limit: Optional[int] = None,
        starting_after: Optional[str] = None,
    ) -> requests.Response:
        params: dict[str, str] = {}
        if limit is not None:
            params["limit"] = str(limit)
        if starting_after:
            params["starting_after"] = starting_after
        return self._transport.get(
            f"{self._base}/{collection}",
            params=params,
            headers=self._headers,
        )


def get_clever_client(
    transport: RetryingTransport,
    district_id: str,
    credentials: CleverCredentials,
    api: ApiConfig = ApiConfig(),
) -> CleverClient:
    """Build a client authorised for one district under one application."""
    token = get_district_token(transport, credentials, district_id, api)
    return CleverClient(transport, token, api.base_url)
