"""District token exchange against the Clever OAuth endpoint."""

from __future__ import annotations

import logging

from scripts.repartee.config import ApiConfig, CleverCredentials
from scripts.repartee.errors import AuthError
from scripts.repartee.pagination import decode_json, is_http_success
from scripts.repartee.transport import RetryingTransport

logger = logging.getLogger("repartee.auth")


def get_district_token(
    transport: RetryingTransport,
    credentials: CleverCredentials,
    district_id: str,
    api: ApiConfig = ApiConfig(),
) -> str:
    """Exchange an application's client credentials for a district bearer token."""
    resp = transport.get(
        api.token_url,
        params={"owner_type": "district", "district": district_id},
        auth=(credentials.client_id, credentials.client_secret),
    )
    if not is_http_success(resp.status_code):
        resp.close()
        raise AuthError(
            f"HTTP {resp.status_code} Error for Clever Request "
            f"/oauth/tokens?owner_type=district&district={district_id}"
        )

    try:
        body = decode_json(resp)
    except ValueError as exc:
        raise AuthError(f"Malformed token response for district {district_id}: {exc}") from exc

    tokens = body.get("data") or []
    if not isinstance(tokens, list) or not all(isinstance(t, dict) for t in tokens):
        raise AuthError(
            f"Malformed token response for district {district_id}: "
            "data must be a list of token objects"
        )
    if not tokens or not tokens[0].get("access_token"):
        raise AuthError(
            f"No {credentials.app_label} access token granted for district {district_id}"
        )

    logger.info(
        "Obtained %s district token",
        credentials.app_label,
        extra={"district_id": district_id, "app": credentials.app_label},
    )
    return str(tokens[0]["access_token"])
