"""Retrying HTTP transport with per-attempt structured logging.

Every Clever call (token exchange and list pages) goes through one
RetryingTransport. Connection errors, timeouts, HTTP 429 and 5xx responses
are retried with exponential backoff plus random jitter; each attempt logs
method, host, path, status code and latency.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_random_exponential,
)

from scripts.repartee.errors import TransportError

logger = logging.getLogger("repartee.transport")

DEFAULT_MAX_ATTEMPTS = 8
DEFAULT_TIMEOUT_S = 30.0

RETRYABLE_EXCEPTIONS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def _is_retryable_response(resp: requests.Response) -> bool:
    return is_retryable_status(resp.status_code)


def _last_outcome(retry_state: RetryCallState) -> requests.Response:
    # Hand back the final response, or re-raise the final exception
    return retry_state.outcome.result()


class RetryingTransport:
    """Send requests through a shared session, retrying transient failures."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        wait: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session = session or requests.Session()
        self._max_attempts = max_attempts
        self._timeout_s = timeout_s
        self._wait = wait if wait is not None else wait_random_exponential(multiplier=0.5, max=30)
        self._sleep = sleep
        # itertools.count is safe to share between threads under the GIL
        self._request_ids = itertools.count(1)

    def close(self) -> None:
        self._session.close()

    def send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Execute one logical request, retrying up to max_attempts times.

        Returns the last response once retries are spent, even if its status
        is still retryable; callers decide what a non-2xx status means.
        Raises TransportError when the final attempt failed at the
        connection level.
        """
        kwargs.setdefault("timeout", self._timeout_s)
        request_id = next(self._request_ids)
        attempts: list[int] = []
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=(
                retry_if_exception_type(RETRYABLE_EXCEPTIONS)
                | retry_if_result(_is_retryable_response)
            ),
            sleep=self._sleep,
            retry_error_callback=_last_outcome,
        )
        try:
            return retrying(self._attempt, request_id, attempts, method, url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(method, url, len(attempts), exc) from exc

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.send("GET", url, **kwargs)

    def _attempt(
        self,
        request_id: int,
        attempts: list[int],
        method: str,
        url: str,
        **kwargs: Any,
    ) -> requests.Response:
        attempt = len(attempts) + 1
        attempts.append(attempt)
        begin = time.monotonic()
        try:
            resp = self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            self._log_attempt(
                logging.ERROR, request_id, attempt, method, url, None, begin, exc
            )
            raise
        level = logging.ERROR if _is_retryable_response(resp) else logging.DEBUG
        self._log_attempt(
            level, request_id, attempt, method, url, resp.status_code, begin, None
        )
        return resp

    def _log_attempt(
        self,
        level: int,
        request_id: int,
        attempt: int,
        method: str,
        url: str,
        status_code: Optional[int],
        begin: float,
        error: Optional[BaseException],
    ) -> None:
        parts = urlsplit(url)
        took = time.monotonic() - begin
        msg = "method=%s host=%s path=%s status_code=%s took=%.3fs request-%d attempt-%d"
        args: list[Any] = [
            method, parts.hostname, parts.path, status_code, took, request_id, attempt,
        ]
        if error is not None:
            msg += " error=%s"
            args.append(error)
        logger.log(
            level,
            msg,
            *args,
            extra={
                "method": method,
                "host": parts.hostname,
                "path": parts.path,
                "status_code": status_code,
                "duration_s": round(took, 3),
                "request": request_id,
                "attempt": attempt,
                "performance": True,
            },
        )
