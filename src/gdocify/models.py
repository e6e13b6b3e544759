"""Public data models for the gdocify SDK.

This module contains the block and inline-span variants produced by the
converter front end, the warning type, and every result type referenced
by the public API surface.  All types are plain dataclasses with no
behaviour beyond what is needed for structural equality and hashing
(where frozen).

The edit operations themselves live in
:mod:`gdocify.converter.operations` next to their wire serialisation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from gdocify.converter.operations import Operation


# ---------------------------------------------------------------------------
# Blocks (output of the segmenter)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Heading:
    """An ATX heading line.  ``text`` excludes the ``#`` markers."""

    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    """A single source line of ordinary text."""

    text: str


@dataclass(frozen=True)
class ListItem:
    """A ``-`` or ``N.`` list line.

    Attributes
    ----------
    ordered:
        ``True`` for ``N.`` items.
    ordinal:
        1-based running number assigned by the segmenter.  Only rendered
        for ordered items.
    indent_depth:
        Number of leading whitespace characters on the source line.
    text:
        Item text without the marker.
    """

    ordered: bool
    ordinal: int
    indent_depth: int
    text: str


@dataclass(frozen=True)
class CodeBlock:
    """Verbatim content of a fenced code block, always newline-terminated."""

    language: str | None
    text: str


@dataclass(frozen=True)
class BlankLine:
    """An empty (or whitespace-only) source line."""


@dataclass(frozen=True)
class Image:
    """A line holding only ``![alt](url)``.  Rendered as a placeholder."""

    alt: str
    url: str


Block = Union[Heading, Paragraph, ListItem, CodeBlock, BlankLine, Image]


# ---------------------------------------------------------------------------
# Inline spans (offsets relative to the owning block's text)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Bold:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Italic:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Link:
    text: str
    url: str
    start: int
    end: int


InlineSpan = Union[Bold, Italic, Link]


# ---------------------------------------------------------------------------
# Conversion warnings
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during Markdown conversion.

    Warnings are accumulated in result objects so callers can inspect
    them after the operation completes.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"UNSUPPORTED_ELEMENT"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Conversion output
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    """Output of the Markdown-to-edit-script conversion.

    Attributes
    ----------
    operations:
        Edit operations in the order the Docs API must apply them.
    warnings:
        Non-fatal issues discovered during conversion.
    end_index:
        Cursor value after the last insertion.  Equals the total inserted
        length plus one.
    """

    operations: list[Operation] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)
    end_index: int = 1

    @property
    def requests(self) -> list[dict]:
        """The operations in ``documents.batchUpdate`` wire form."""
        return [op.to_request() for op in self.operations]


# ---------------------------------------------------------------------------
# Public result types (returned from client methods)
# ---------------------------------------------------------------------------

@dataclass
class DocumentCreateResult:
    """Result of :meth:`GdocifyClient.create_document_from_markdown`.

    Attributes
    ----------
    document_id:
        The ID of the newly created Google Doc.
    document_url:
        Browser URL of the document.
    operations_applied:
        Number of edit operations sent in the ``batchUpdate`` call.
    warnings:
        Non-fatal issues encountered during conversion.
    """

    document_id: str
    document_url: str
    operations_applied: int
    warnings: list[ConversionWarning] = field(default_factory=list)
