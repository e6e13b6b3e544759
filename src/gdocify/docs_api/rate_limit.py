"""Token-bucket rate limiting.

:class:`TokenBucket` paces outgoing Google Docs API calls: tokens refill
at *rate* per second up to a *burst* ceiling, and :meth:`acquire` blocks
until one is available.  :meth:`try_acquire` is the non-blocking variant
used by :class:`KeyedRateLimiter`, which keeps one bucket per client key
to throttle incoming requests to the HTTP service.
"""

from __future__ import annotations

import threading
import time


class TokenBucket:
    """Thread-safe token bucket.

    Parameters
    ----------
    rate_rps:
        Sustained token-refill rate in tokens per second.
    burst:
        Maximum number of tokens the bucket can hold.
    """

    __slots__ = ("_lock", "burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        self.last_refill: float = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> None:
        elapsed = now - self.last_refill
        self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
        self.last_refill = now

    def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, sleeping until they are available.

        Returns the number of seconds waited (``0.0`` when no wait).
        """
        with self._lock:
            self._refill(time.monotonic())
            if self.tokens >= tokens:
                self.tokens -= tokens
                return 0.0
            wait = (tokens - self.tokens) / self.rate
            self.tokens = 0.0

        # Sleep outside the lock so other threads can take their turn.
        time.sleep(wait)
        return wait

    def try_acquire(self, tokens: int = 1) -> bool:
        """Take *tokens* if available right now; never blocks."""
        with self._lock:
            self._refill(time.monotonic())
            if self.tokens >= tokens:
                self.tokens -= tokens
                return True
            return False


class KeyedRateLimiter:
    """Allow at most *max_requests* per *window_seconds* for each key.

    Each key gets its own :class:`TokenBucket` with a full burst, so a new
    client may spend its whole allowance at once and then refills evenly
    across the window.  A bucket left unused for a whole window has
    refilled completely, so it is dropped and recreated on demand; idle
    buckets are swept at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: float) -> None:
        if max_requests < 1:
            raise ValueError(f"max_requests must be >= 1, got {max_requests}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0, got {window_seconds}")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.monotonic()

    def __len__(self) -> int:
        return len(self._buckets)

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        idle = [key for key, bucket in self._buckets.items() if bucket.last_refill <= cutoff]
        for key in idle:
            del self._buckets[key]
        self._last_sweep = now

    def allow(self, key: str) -> bool:
        with self._lock:
            now = time.monotonic()
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket(
                    rate_rps=self.max_requests / self.window_seconds,
                    burst=self.max_requests,
                )
                self._buckets[key] = bucket
        return bucket.try_acquire()
