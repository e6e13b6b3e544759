"""Full Markdown-to-Google-Docs conversion pipeline.

:class:`MarkdownToDocsConverter` runs the two stages:

1. **Segment**: :func:`segment` classifies source lines into blocks.
2. **Emit**: :func:`emit` turns the blocks into ``batchUpdate``
   operations, scanning inline spans per block.

The result is a :class:`ConversionResult` holding the operations and any
non-fatal warnings.
"""

from __future__ import annotations

import dataclasses
import json
import sys

from gdocify.config import GdocifyConfig
from gdocify.converter.emitter import emit
from gdocify.converter.segmenter import segment
from gdocify.errors import GdocifyInputError
from gdocify.models import ConversionResult
from gdocify.observability import NoopMetricsHook, get_logger, log_fields

log = get_logger("gdocify.converter")


class MarkdownToDocsConverter:
    """Convert Markdown text to Google Docs edit operations.

    Parameters
    ----------
    config:
        Controls rendering (code font, bullet glyph, indents, unsupported
        element policy) and debug dumps.

    Examples
    --------
    >>> converter = MarkdownToDocsConverter(GdocifyConfig())
    >>> result = converter.convert("# Title")
    >>> result.requests[0]
    {'insertText': {'text': 'Title\\n', 'location': {'index': 1}}}
    """

    def __init__(self, config: GdocifyConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def convert(self, markdown: str) -> ConversionResult:
        """Segment and emit *markdown*.

        Raises
        ------
        GdocifyInputError
            If *markdown* is not a string.
        GdocifyConversionFailedError
            On an internal fault; carries the failing ``block_index``.
        """
        if not isinstance(markdown, str):
            raise GdocifyInputError(
                f"markdown must be a string, got {type(markdown).__name__}",
                context={"field": "markdown", "reason": "type"},
            )

        blocks = segment(markdown)

        if self._config.debug_dump_blocks:
            dump = [{"type": type(b).__name__, **dataclasses.asdict(b)} for b in blocks]
            print(
                "[gdocify] Blocks:",
                json.dumps(dump, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        result = emit(blocks, self._config)

        if self._config.debug_dump_payload:
            from gdocify.utils.redact import redact

            safe = redact({"requests": result.requests}, self._config.token)
            print(
                "[gdocify] batchUpdate payload:",
                json.dumps(safe, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        self._metrics.increment("gdocify.operations_emitted_total", len(result.operations))
        if result.warnings:
            self._metrics.increment("gdocify.conversion_warnings_total", len(result.warnings))
        log.debug(
            "conversion complete",
            extra=log_fields(
                op="convert",
                blocks=len(blocks),
                operations=len(result.operations),
                warnings=len(result.warnings),
                end_index=result.end_index,
            ),
        )
        return result


def markdown_to_requests(markdown: str, config: GdocifyConfig | None = None) -> list[dict]:
    """Shortcut returning the ``batchUpdate`` request list for *markdown*."""
    return MarkdownToDocsConverter(config or GdocifyConfig()).convert(markdown).requests
