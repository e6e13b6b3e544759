"""Document API wrappers for the Google Docs API.

:class:`DocumentAPI` is a thin wrapper around the ``/documents``
endpoints.  All HTTP concerns (auth, retries, rate limiting) are handled
by the underlying :class:`DocsTransport`.
"""

from __future__ import annotations

from typing import Any

from .transport import DocsTransport


class DocumentAPI:
    """Synchronous wrapper for the Google Docs Documents API.

    Parameters
    ----------
    transport:
        A configured :class:`DocsTransport` instance.
    """

    def __init__(self, transport: DocsTransport) -> None:
        self._transport = transport

    def create(self, title: str) -> dict[str, Any]:
        """Create an empty document.

        Parameters
        ----------
        title:
            Document title shown in Drive.

        Returns
        -------
        dict
            The created document resource; ``documentId`` identifies it.
        """
        return self._transport.request("POST", "/documents", json={"title": title})

    def batch_update(
        self,
        document_id: str,
        requests: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Apply *requests* to a document in a single call.

        The API applies requests in list order, which the emitted cursor
        offsets rely on.  Never split the list across calls.

        Parameters
        ----------
        document_id:
            ID of the target document.
        requests:
            ``batchUpdate`` request dicts, e.g. from
            :attr:`ConversionResult.requests`.

        Returns
        -------
        dict
            The ``batchUpdate`` response (``replies``, ``writeControl``).
        """
        return self._transport.request(
            "POST",
            f"/documents/{document_id}:batchUpdate",
            json={"requests": requests},
        )

    def get(self, document_id: str) -> dict[str, Any]:
        """Retrieve a document by its ID."""
        return self._transport.request("GET", f"/documents/{document_id}")
