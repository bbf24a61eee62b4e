"""Exception hierarchy for configuration, auth, fetch and delivery failures."""

from __future__ import annotations

from typing import Optional


class ReparteeError(Exception):
    """Base class for every failure the CLI reports as a non-zero exit."""


class ConfigError(ReparteeError):
    """A required flag or environment variable is missing or malformed."""


class AuthError(ReparteeError):
    """The district token exchange failed."""


class TransportError(ReparteeError):
    """An HTTP call kept failing after every retry was spent."""

    def __init__(self, method: str, url: str, attempts: int, cause: BaseException) -> None:
        super().__init__(
            f"{method} {url} failed after {attempts} attempt(s): {cause}"
        )
        self.method = method
        self.url = url
        self.attempts = attempts
        self.__cause__ = cause


class FetchError(ReparteeError):
    """A list endpoint answered with a non-success status."""

    def __init__(
        self,
        endpoint: str,
        status_code: int,
        cursor: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        msg = f"HTTP {status_code} Error for Clever Request /{endpoint}"
        if cursor:
            msg += f" starting after {cursor}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.endpoint = endpoint
        self.status_code = status_code
        self.cursor = cursor
        self.reason = reason


class DeliveryError(ReparteeError):
    """The summary email could not be composed or sent."""
