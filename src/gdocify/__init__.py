"""gdocify: Markdown to Google Docs ``batchUpdate`` converter and SDK.

Public re-exports
-----------------

* **Client:** :class:`GdocifyClient`
* **Conversion:** :class:`MarkdownToDocsConverter`, :func:`markdown_to_requests`
* **Configuration:** :class:`GdocifyConfig`, :class:`ServerConfig`
* **Errors:** Every :class:`GdocifyError` subclass and :class:`ErrorCode`
* **Models:** Blocks, inline spans and result dataclasses

Usage::

    from gdocify import markdown_to_requests

    requests = markdown_to_requests("# Hello\\n\\nWorld")
"""

from __future__ import annotations

__version__ = "0.1.0"

# ── Configuration ───────────────────────────────────────────────────────
from gdocify.config import DEFAULT_CODE_BACKGROUND, GdocifyConfig, ServerConfig

# ── Errors ──────────────────────────────────────────────────────────────
from gdocify.errors import (
    ErrorCode,
    GdocifyAuthError,
    GdocifyConversionError,
    GdocifyConversionFailedError,
    GdocifyError,
    GdocifyInlineScanError,
    GdocifyInputError,
    GdocifyNetworkError,
    GdocifyNotFoundError,
    GdocifyPermissionError,
    GdocifyRateLimitError,
    GdocifyRetryExhaustedError,
    GdocifyUnsupportedElementError,
    GdocifyValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from gdocify.models import (
    BlankLine,
    Block,
    Bold,
    CodeBlock,
    ConversionResult,
    ConversionWarning,
    DocumentCreateResult,
    Heading,
    Image,
    InlineSpan,
    Italic,
    Link,
    ListItem,
    Paragraph,
)

# ── Conversion ──────────────────────────────────────────────────────────
from gdocify.converter import MarkdownToDocsConverter, markdown_to_requests

# ── Client ──────────────────────────────────────────────────────────────
from gdocify.client import GdocifyClient

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    "__version__",
    # Client
    "GdocifyClient",
    # Conversion
    "MarkdownToDocsConverter",
    "markdown_to_requests",
    # Configuration
    "GdocifyConfig",
    "ServerConfig",
    "DEFAULT_CODE_BACKGROUND",
    # Error base + code enum
    "GdocifyError",
    "ErrorCode",
    "GdocifyInputError",
    # API / transport errors
    "GdocifyValidationError",
    "GdocifyAuthError",
    "GdocifyPermissionError",
    "GdocifyNotFoundError",
    "GdocifyRateLimitError",
    "GdocifyRetryExhaustedError",
    "GdocifyNetworkError",
    # Conversion errors
    "GdocifyConversionError",
    "GdocifyConversionFailedError",
    "GdocifyInlineScanError",
    "GdocifyUnsupportedElementError",
    # Models: blocks
    "Block",
    "Heading",
    "Paragraph",
    "ListItem",
    "CodeBlock",
    "BlankLine",
    "Image",
    # Models: inline spans
    "InlineSpan",
    "Bold",
    "Italic",
    "Link",
    # Models: results
    "ConversionResult",
    "ConversionWarning",
    "DocumentCreateResult",
]
