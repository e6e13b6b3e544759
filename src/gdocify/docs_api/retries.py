"""Retry decisions and backoff delays for Google Docs API calls.

Three pure helpers used by :mod:`gdocify.docs_api.transport`:

* :func:`should_retry` -- is a failed attempt worth repeating?
* :func:`compute_backoff` -- how long to wait before the next attempt.
* :func:`parse_retry_after` -- read a ``Retry-After`` header.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

# Statuses Google documents as transient.
_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether attempt number *attempt* (0-indexed) should be repeated.

    A request is retried when attempts remain and either a timeout or
    network error occurred, or the response status is 429 or a 5xx
    gateway/server error.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, _RETRYABLE_EXCEPTIONS)
    if status_code is not None:
        return status_code in _RETRYABLE_STATUSES
    return False


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before retrying after attempt *attempt* (0-indexed).

    A server-supplied *retry_after* wins, capped at *maximum*.  Otherwise
    the delay is ``base * 2**attempt`` capped at *maximum*.  With *jitter*
    the result is scaled to a random point between 50 % and 100 %.
    """
    if retry_after is not None:
        delay = min(max(retry_after, 0.0), maximum)
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay


def parse_retry_after(response: httpx.Response) -> float | None:
    """Return the ``Retry-After`` header in seconds, or ``None``.

    Both the delta-seconds and the HTTP-date forms are accepted.
    """
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    raw = raw.strip()
    try:
        seconds = float(raw)
    except ValueError:
        pass
    else:
        return max(seconds, 0.0) if math.isfinite(seconds) else None
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)
