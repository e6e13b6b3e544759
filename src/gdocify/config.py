"""SDK and service configuration for gdocify.

:class:`GdocifyConfig` is a dataclass that captures every tuneable knob of
the converter and the Google Docs client.  Instances are passed to
:class:`GdocifyClient` and :class:`MarkdownToDocsConverter`.

:class:`ServerConfig` holds the HTTP service settings and is normally built
from the process environment with :meth:`ServerConfig.from_env`.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

DEFAULT_CODE_BACKGROUND: tuple[float, float, float] = (0.95, 0.95, 0.95)
"""Light gray used behind fenced code, as an RGB triple in ``[0, 1]``."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class GdocifyConfig:
    """Complete configuration for a gdocify client.

    Every parameter has a sensible default.  Only API calls need ``token``;
    pure conversions work without one.

    Parameters
    ----------
    token:
        OAuth 2.0 access token for the Google Docs API.  Never logged.
    base_url:
        API root URL.  Override for proxy or testing environments.
    document_url_template:
        Format string used to build the browser URL of a created
        document.  Receives ``document_id``.
    code_font_family:
        Font applied to fenced code blocks.
    code_background:
        RGB background applied to fenced code blocks.
    bullet_glyph:
        Literal prefix inserted before unordered list item text.
    list_indent_pt:
        Start indent, in points, per unit of list-item leading whitespace.
    reset_paragraph_style:
        Emit a ``NORMAL_TEXT`` paragraph style for every plain paragraph so
        it does not inherit a preceding heading's style.
    unsupported_element_policy:
        What to do with Markdown elements Google Docs cannot render here
        (images).

        * ``"placeholder"``: insert ``[Image: <alt-or-url>]``.
        * ``"skip"``: omit the element, keep a warning.
        * ``"raise"``: raise :class:`GdocifyUnsupportedElementError`.
    inline_scan_limit:
        Longest block text (in characters) that italic detection will
        scan.  Longer text keeps its bold and link spans only.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Add random jitter to backoff intervals.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    debug_dump_blocks:
        Write the segmented block stream to *stderr* on each conversion.
    debug_dump_payload:
        Write the (redacted) ``batchUpdate`` payload to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    base_url: str = "https://docs.googleapis.com/v1"

    document_url_template: str = "https://docs.google.com/document/d/{document_id}/edit"

    # ── Rendering ───────────────────────────────────────────────────────
    code_font_family: str = "Courier New"

    code_background: tuple[float, float, float] = DEFAULT_CODE_BACKGROUND

    bullet_glyph: str = "• "

    list_indent_pt: float = 18.0

    reset_paragraph_style: bool = False

    unsupported_element_policy: Literal["placeholder", "skip", "raise"] = "placeholder"

    inline_scan_limit: int = 10_000

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 5.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_blocks: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your access token, or target localhost for testing."
            )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.list_indent_pt < 0:
            raise ValueError(f"list_indent_pt must be >= 0, got {self.list_indent_pt}")
        if self.inline_scan_limit < 1:
            raise ValueError(f"inline_scan_limit must be >= 1, got {self.inline_scan_limit}")
        if len(self.code_background) != 3 or not all(
            0.0 <= channel <= 1.0 for channel in self.code_background
        ):
            raise ValueError(
                f"code_background must be three channels in [0, 1], got {self.code_background!r}"
            )
        if self.unsupported_element_policy not in ("placeholder", "skip", "raise"):
            raise ValueError(
                "unsupported_element_policy must be 'placeholder', 'skip' or 'raise', "
                f"got {self.unsupported_element_policy!r}"
            )

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"GdocifyConfig({', '.join(parts)})"


# ---------------------------------------------------------------------------
# HTTP service settings
# ---------------------------------------------------------------------------

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class ServerConfig:
    """Settings for :mod:`gdocify.server`.

    Parameters
    ----------
    api_key:
        When set, every route except ``/health`` requires a matching
        ``X-API-Key`` header.
    enable_rate_limit:
        Apply per-client request limiting to ``/api`` routes.
    rate_limit_window_ms:
        Length of the rate-limit window in milliseconds.
    rate_limit_max:
        Requests allowed per client per window.
    debug:
        Include exception details in 5xx responses.
    max_body_bytes:
        Largest request body accepted; bigger bodies get a 413.
    """

    api_key: str | None = None

    enable_rate_limit: bool = False

    rate_limit_window_ms: int = 15 * 60 * 1000

    rate_limit_max: int = 100

    debug: bool = False

    max_body_bytes: int = 10 * 1024 * 1024

    def __post_init__(self) -> None:
        if self.max_body_bytes < 1:
            raise ValueError(f"max_body_bytes must be >= 1, got {self.max_body_bytes}")
        if self.rate_limit_window_ms <= 0:
            raise ValueError(
                f"rate_limit_window_ms must be > 0, got {self.rate_limit_window_ms}"
            )
        if self.rate_limit_max < 1:
            raise ValueError(f"rate_limit_max must be >= 1, got {self.rate_limit_max}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Build settings from environment variables.

        Reads ``API_KEY``, ``ENABLE_RATE_LIMIT``, ``RATE_LIMIT_WINDOW_MS``,
        ``RATE_LIMIT_MAX``, ``MAX_BODY_BYTES`` and ``GDOCIFY_ENV``.
        Unparseable numbers fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("API_KEY") or None,
            enable_rate_limit=env.get("ENABLE_RATE_LIMIT", "").strip().lower() in _TRUTHY,
            rate_limit_window_ms=_int_or(env.get("RATE_LIMIT_WINDOW_MS"), 15 * 60 * 1000),
            rate_limit_max=_int_or(env.get("RATE_LIMIT_MAX"), 100),
            debug=env.get("GDOCIFY_ENV", "").strip().lower() == "development",
            max_body_bytes=_int_or(env.get("MAX_BODY_BYTES"), 10 * 1024 * 1024),
        )

    def __repr__(self) -> str:
        key = "****" if self.api_key else None
        return (
            f"ServerConfig(api_key={key!r}, enable_rate_limit={self.enable_rate_limit!r}, "
            f"rate_limit_window_ms={self.rate_limit_window_ms!r}, "
            f"rate_limit_max={self.rate_limit_max!r}, debug={self.debug!r}, "
            f"max_body_bytes={self.max_body_bytes!r})"
        )


def _int_or(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default
