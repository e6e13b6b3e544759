"""Credential redaction for debug dumps and logs.

Apply :func:`redact` to any request body, header set or service payload
before it is printed.  It enforces:

* values under **sensitive keys** (``access_token``, ``credentials``,
  ``Authorization``, ``X-API-Key`` ...) are masked;
* ``Bearer <token>`` fragments are masked wherever they appear;
* the configured access **token is never present** in the output, even
  when it leaks into an unrelated string (for example inside a document
  body).
"""

from __future__ import annotations

import copy
import re
from typing import Any

# A key is sensitive when its lowercased name contains any of these.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
    "apikey",
})

_BEARER_RE = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


def _mask_token(value: str, token: str | None) -> str:
    """Replace the explicit *token* and any bearer credential in *value*."""
    if token and token in value:
        suffix = token[-4:] if len(token) >= 8 else "****"
        value = value.replace(token, f"<redacted:...{suffix}>")
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _mask_token(value, token)
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with credentials removed.

    Parameters
    ----------
    payload:
        Dictionary to sanitise, typically a ``batchUpdate`` body, a set of
        request headers, or an HTTP service request body.
    token:
        The OAuth access token in use.  Every occurrence of this exact
        string is replaced, whatever key it sits under.

    Returns
    -------
    dict
        A new dictionary; *payload* is never mutated.

    Examples
    --------
    >>> redact({"credentials": {"access_token": "ya29.abc"}})
    {'credentials': '<redacted>'}
    >>> redact({"note": "Bearer ya29.abc"})
    {'note': 'Bearer <redacted>'}
    """
    return _redact_dict(copy.deepcopy(payload), token)
