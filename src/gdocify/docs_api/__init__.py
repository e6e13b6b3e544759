"""gdocify.docs_api -- Google Docs API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Token bucket pacing and per-key request limiting.
* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.documents` -- Documents API wrappers.
"""

from __future__ import annotations

from .documents import DocumentAPI
from .rate_limit import KeyedRateLimiter, TokenBucket
from .retries import compute_backoff, should_retry
from .transport import DocsTransport

__all__ = [
    "DocsTransport",
    "DocumentAPI",
    "KeyedRateLimiter",
    "TokenBucket",
    "compute_backoff",
    "should_retry",
]
