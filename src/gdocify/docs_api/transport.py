"""HTTP transport for the Google Docs API.

Each request goes through the same lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the request with the bearer access token.
3. On ``2xx`` -- return the parsed JSON body.
4. On ``429`` -- honour ``Retry-After`` (or back off) and retry.
5. On ``5xx`` / network error -- exponential backoff and retry.
6. On any other ``4xx`` -- raise the matching typed error immediately.
7. When attempts run out -- raise :class:`GdocifyRateLimitError` (if the
   last answer was 429) or :class:`GdocifyRetryExhaustedError`.

Google reports errors as ``{"error": {"code", "message", "status"}}``;
``message`` and ``status`` are copied into the raised error.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from gdocify.config import GdocifyConfig
from gdocify.errors import (
    GdocifyAuthError,
    GdocifyNetworkError,
    GdocifyNotFoundError,
    GdocifyPermissionError,
    GdocifyRateLimitError,
    GdocifyRetryExhaustedError,
    GdocifyValidationError,
)
from gdocify.observability import NoopMetricsHook, get_logger, log_fields

from .rate_limit import TokenBucket
from .retries import _RETRYABLE_STATUSES, compute_backoff, parse_retry_after, should_retry

log = get_logger("gdocify.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error_details(response: httpx.Response) -> tuple[str, str, Any]:
    """Return ``(message, api_status, body)`` from a Google error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", "")), str(error.get("status", "")), body
    return response.text[:500], "", body


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable 4xx response."""
    status = response.status_code
    message, api_status, body = _error_details(response)
    context: dict[str, Any] = {"status_code": status, "api_status": api_status}

    if status == 401:
        raise GdocifyAuthError(
            message=f"Authentication failed on {method} {path}: {message}",
            context=context,
        )
    if status == 403:
        raise GdocifyPermissionError(
            message=f"Permission denied on {method} {path}: {message}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise GdocifyNotFoundError(
            message=f"Resource not found on {method} {path}: {message}",
            context={**context, "path": path},
        )
    raise GdocifyValidationError(
        message=f"Client error {status} on {method} {path}: {message}",
        context={**context, "body": body},
    )


def _dump_exchange(
    config: GdocifyConfig,
    method: str,
    response: httpx.Response,
    json_payload: Any,
) -> None:
    """Write a redacted request/response dump to stderr when enabled."""
    if not config.debug_dump_payload:
        return
    from gdocify.utils.redact import redact

    try:
        resp_body: Any = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    dump: dict[str, Any] = {
        "method": method,
        "url": str(response.url),
        "response_status": response.status_code,
        "response_body": resp_body,
    }
    if json_payload is not None:
        dump["request_body"] = json_payload
    print(_json.dumps(redact(dump, config.token), indent=2, default=str), file=sys.stderr)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class DocsTransport:
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        Supplies the access token, base URL, timeouts and retry policy.
    transport:
        Optional httpx transport, e.g. :class:`httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        config: GdocifyConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=transport,
        )

    # -- public API --------------------------------------------------------

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute a request against the Docs API and return the JSON body.

        Parameters
        ----------
        method:
            HTTP method.
        path:
            Path relative to ``base_url`` (e.g. ``/documents``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=``,
            ``params=`` ...).

        Raises
        ------
        GdocifyAuthError
            On 401.
        GdocifyPermissionError
            On 403.
        GdocifyNotFoundError
            On 404.
        GdocifyValidationError
            On 400 and other non-retryable 4xx.
        GdocifyRateLimitError
            When every attempt was answered with 429.
        GdocifyRetryExhaustedError
            When attempts ran out on 5xx or network failures.
        GdocifyNetworkError
            When a transport failure happens and only one attempt is allowed.
        """
        max_attempts = self._config.retry_max_attempts
        last_exception: Exception | None = None
        last_status: int | None = None
        last_retry_after: float | None = None
        json_payload = kwargs.get("json")
        tags = {"method": method, "path": path}

        for attempt in range(max_attempts):
            wait = self._bucket.acquire()
            if wait > 0:
                self._metrics.timing("gdocify.rate_limit_wait_ms", wait * 1000, tags=tags)

            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exception, last_status = exc, None
                self._metrics.increment(
                    "gdocify.requests_total", tags={**tags, "status": "error"},
                )
                log.warning(
                    "Request network error",
                    extra=log_fields(
                        op="request", method=method, path=path,
                        attempt=attempt + 1, error=str(exc),
                    ),
                )
                if not should_retry(None, exc, attempt, max_attempts):
                    break
                self._metrics.increment(
                    "gdocify.retries_total", tags={**tags, "reason": "network_error"},
                )
                time.sleep(compute_backoff(
                    attempt,
                    base=self._config.retry_base_delay,
                    maximum=self._config.retry_max_delay,
                    jitter=self._config.retry_jitter,
                ))
                continue

            elapsed_ms = (time.monotonic() - t0) * 1000
            last_status, last_exception = response.status_code, None
            status_tags = {**tags, "status": str(response.status_code)}
            self._metrics.increment("gdocify.requests_total", tags=status_tags)
            self._metrics.timing("gdocify.request_duration_ms", elapsed_ms, tags=status_tags)
            _dump_exchange(self._config, method, response, json_payload)

            if 200 <= response.status_code < 300:
                if response.status_code == 204 or not response.content:
                    return {}
                result: dict = response.json()
                return result

            if response.status_code not in _RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)

            retry_after: float | None = None
            reason = "server_error"
            if response.status_code == 429:
                retry_after = parse_retry_after(response)
                last_retry_after = retry_after
                reason = "rate_limited"
                self._metrics.increment("gdocify.rate_limited_total", tags=tags)
                log.warning(
                    "Rate limited by Google Docs API",
                    extra=log_fields(
                        op="request", method=method, path=path, status_code=429,
                        retry_after=retry_after, attempt=attempt + 1,
                    ),
                )

            if not should_retry(response.status_code, None, attempt, max_attempts):
                break

            self._metrics.increment("gdocify.retries_total", tags={**tags, "reason": reason})
            time.sleep(compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            ))

        ctx: dict[str, Any] = {"attempts": max_attempts, "last_status_code": last_status}
        if last_exception is not None:
            if max_attempts == 1:
                raise GdocifyNetworkError(
                    message=f"Network error on {method} {path}: {last_exception}",
                    context={"url": path, "attempt": max_attempts},
                    cause=last_exception,
                ) from last_exception
            raise GdocifyRetryExhaustedError(
                message=(
                    f"All {max_attempts} attempts exhausted for {method} {path} "
                    f"(last error: {last_exception})"
                ),
                context=ctx,
                cause=last_exception,
            ) from last_exception
        if last_status == 429:
            raise GdocifyRateLimitError(
                message=f"Rate limited on {method} {path} after {max_attempts} attempts",
                context={**ctx, "retry_after_seconds": last_retry_after},
            )
        raise GdocifyRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} {path} "
                f"(last status: {last_status})"
            ),
            context=ctx,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> DocsTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
