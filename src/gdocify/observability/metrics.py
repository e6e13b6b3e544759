"""Metrics hook protocol and no-op default implementation.

gdocify reports counters and timings at a handful of points (API
requests, retries, conversions, document creation).  A
:class:`NoopMetricsHook` is used unless the caller passes a backend via
``GdocifyConfig(metrics=...)`` that satisfies :class:`MetricsHook`.

Emitted metric names:

* ``gdocify.requests_total``              -- counter
* ``gdocify.retries_total``               -- counter
* ``gdocify.rate_limited_total``          -- counter
* ``gdocify.request_duration_ms``         -- timing
* ``gdocify.rate_limit_wait_ms``          -- timing
* ``gdocify.operations_emitted_total``    -- counter
* ``gdocify.conversion_warnings_total``   -- counter
* ``gdocify.documents_created_total``     -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Anything with ``increment`` and ``timing`` can receive gdocify metrics.

    *tags* are flat string-to-string dicts; backends map them to their own
    labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Add *value* to the counter *name*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Discards every data point.  Used when no backend is configured."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
