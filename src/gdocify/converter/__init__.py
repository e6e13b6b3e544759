"""Markdown → Google Docs conversion pipeline.

Public API:

- :class:`MarkdownToDocsConverter`: Markdown → ``batchUpdate`` operations.
- :func:`markdown_to_requests`: one-call shortcut returning wire dicts.
- :func:`segment`: classify source lines into blocks.
- :func:`scan_inline`: find bold, italic and link spans in block text.
- :func:`emit`: turn blocks into cursor-checked operations.
"""

from gdocify.converter.emitter import emit
from gdocify.converter.inline_scanner import scan_inline
from gdocify.converter.md_to_docs import MarkdownToDocsConverter, markdown_to_requests
from gdocify.converter.segmenter import segment

__all__ = [
    "MarkdownToDocsConverter",
    "emit",
    "markdown_to_requests",
    "scan_inline",
    "segment",
]
