"""Synchronous Google Docs SDK client.

:class:`GdocifyClient` ties the converter to the Docs API: it turns
Markdown into a ``batchUpdate`` edit script, creates a document and
applies the script in one call.

Usage::

    from gdocify import GdocifyClient

    with GdocifyClient(token="ya29.xxx") as client:
        result = client.create_document_from_markdown(
            doc_name="Release notes",
            markdown="# Hello\\n\\nWorld",
        )
        print(result.document_url)
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from gdocify.config import GdocifyConfig
from gdocify.converter.md_to_docs import MarkdownToDocsConverter
from gdocify.docs_api.documents import DocumentAPI
from gdocify.docs_api.transport import DocsTransport
from gdocify.errors import GdocifyInputError
from gdocify.models import ConversionResult, DocumentCreateResult
from gdocify.observability import NoopMetricsHook, get_logger, log_fields

log = get_logger("gdocify.client")


class GdocifyClient:
    """Synchronous Google Docs SDK client.

    Parameters
    ----------
    token:
        OAuth 2.0 access token with the ``documents`` scope.  **Required.**
    http_transport:
        Optional httpx transport forwarded to :class:`DocsTransport`.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`GdocifyConfig`.
    """

    def __init__(
        self,
        token: str,
        *,
        http_transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = GdocifyConfig(token=token, **kwargs)
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )
        self._transport = DocsTransport(self._config, transport=http_transport)
        self._documents = DocumentAPI(self._transport)
        self._converter = MarkdownToDocsConverter(self._config)

    @property
    def config(self) -> GdocifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, markdown: str) -> ConversionResult:
        """Convert *markdown* to edit operations without calling the API."""
        return self._converter.convert(markdown)

    # ------------------------------------------------------------------
    # Document creation
    # ------------------------------------------------------------------

    def create_document_from_markdown(
        self,
        doc_name: str,
        markdown: str,
    ) -> DocumentCreateResult:
        """Create a new Google Doc holding the rendered *markdown*.

        Parameters
        ----------
        doc_name:
            Title of the new document.  Surrounding whitespace is trimmed.
        markdown:
            Raw Markdown text to convert.

        Returns
        -------
        DocumentCreateResult

        Raises
        ------
        GdocifyInputError
            If *doc_name* is empty or either argument is not a string.
            Raised before any API call is made.
        """
        if not isinstance(doc_name, str) or not doc_name.strip():
            raise GdocifyInputError(
                "doc_name must be a non-empty string",
                context={"field": "doc_name", "reason": "empty"},
            )
        title = doc_name.strip()

        # 1. Convert first so bad input never creates an empty document
        conversion = self._converter.convert(markdown)
        requests = conversion.requests

        # 2. Create the document
        t0 = time.monotonic()
        created = self._documents.create(title)
        document_id = str(created.get("documentId", ""))

        # 3. Apply the whole edit script in one ordered call
        if requests:
            self._documents.batch_update(document_id, requests)

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.increment("gdocify.documents_created_total")
        log.info(
            "document created",
            extra=log_fields(
                op="create_document",
                document_id=document_id,
                operations=len(requests),
                warnings=len(conversion.warnings),
                elapsed_ms=round(elapsed_ms, 1),
            ),
        )

        return DocumentCreateResult(
            document_id=document_id,
            document_url=self._config.document_url_template.format(document_id=document_id),
            operations_applied=len(requests),
            warnings=list(conversion.warnings),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._transport.close()

    def __enter__(self) -> GdocifyClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
