"""Detect bold, italic and link spans inside a block's text.

Span offsets point into the *raw* text, delimiters included, because the
converter inserts the line verbatim and styles the inner part::

    "a **b** c"  ->  Bold(text="b", start=4, end=5)

Detection rules:

* **Bold**: ``**x**`` or ``__x__``.  A ``***x***`` run also counts.
* **Italic**: ``*x*`` or ``_x_`` where the delimiter run is a single
  character, or a ``***x***`` run (bold and italic over the same range).
* **Link**: ``[text](url)`` or ``[text](url "title")``; the span covers
  the display text.  ``![alt](url)`` is an image, not a link.

Opening delimiters may not be followed by whitespace and closing ones may
not be preceded by it.  Underscore delimiters never match inside a word
(``snake_case_name`` stays plain).

Emphasis uses a delimiter-run scanner: each opener looks up its closer
with a binary search, so a line is scanned in ``O(n log n)``.
"""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from typing import NamedTuple

from gdocify.config import GdocifyConfig
from gdocify.errors import GdocifyInlineScanError
from gdocify.models import Bold, ConversionWarning, InlineSpan, Italic, Link
from gdocify.observability import get_logger, log_fields

log = get_logger("gdocify.converter")

_DEFAULT_SCAN_LIMIT = GdocifyConfig.inline_scan_limit


class _Delimiter(NamedTuple):
    char: str
    sizes: frozenset[int]
    # Underscore runs must not touch a word character on their outer side.
    word_bounded: bool


_BOLD_DELIMITERS = (
    _Delimiter("*", frozenset({2, 3}), word_bounded=False),
    _Delimiter("_", frozenset({2, 3}), word_bounded=True),
)

_ITALIC_DELIMITERS = (
    _Delimiter("*", frozenset({1, 3}), word_bounded=False),
    _Delimiter("_", frozenset({1, 3}), word_bounded=True),
)

_RUN_RES = {"*": re.compile(r"\*+"), "_": re.compile(r"_+")}
_WORD_RE = re.compile(r"\w")

_LINK_RE = re.compile(
    r"""(?<!!)\[(?P<inner>[^\[\]]+)\]\((?P<url>[^()\s]+)(?:\s+"[^"]*")?\)"""
)


def _is_word(ch: str) -> bool:
    return _WORD_RE.match(ch) is not None


def _delimited(delim: _Delimiter, text: str) -> list[tuple[str, int, int]]:
    """Return ``(inner, start, end)`` for each matched pair of *delim* runs.

    Runs are maximal, and an opener only pairs with a closer of the same
    length.  Pairs are taken leftmost first and never nest or overlap; the
    inner text is non-empty and does not cross a newline.
    """
    n = len(text)
    runs = [(m.start(), m.end()) for m in _RUN_RES[delim.char].finditer(text)]

    closers: dict[int, list[int]] = {size: [] for size in delim.sizes}
    for start, end in runs:
        if end - start not in delim.sizes or start == 0 or text[start - 1].isspace():
            continue
        if delim.word_bounded and end < n and _is_word(text[end]):
            continue
        closers[end - start].append(start)

    newlines = [i for i, ch in enumerate(text) if ch == "\n"]
    found: list[tuple[str, int, int]] = []
    resume = 0
    for start, end in runs:
        size = end - start
        if start < resume or size not in delim.sizes or end >= n or text[end].isspace():
            continue
        if delim.word_bounded and start > 0 and _is_word(text[start - 1]):
            continue
        candidates = closers[size]
        k = bisect_right(candidates, start)
        if k == len(candidates):
            continue
        close = candidates[k]
        nl = bisect_left(newlines, end)
        if nl < len(newlines) and newlines[nl] < close:
            continue
        found.append((text[end:close], end, close))
        resume = close + size
    return found


def _find_spans(delimiters: tuple[_Delimiter, ...], text: str) -> list[tuple[str, int, int]]:
    found: list[tuple[str, int, int]] = []
    for delim in delimiters:
        found.extend(_delimited(delim, text))
    found.sort(key=lambda span: span[1])
    return found


def _scan_bold(text: str) -> list[InlineSpan]:
    return [Bold(text=inner, start=start, end=end)
            for inner, start, end in _find_spans(_BOLD_DELIMITERS, text)]


def _scan_italic(text: str, limit: int) -> list[InlineSpan]:
    """Italic spans, guarded against pathological input sizes.

    Raises
    ------
    GdocifyInlineScanError
        When *text* is longer than *limit* characters.
    """
    if len(text) > limit:
        raise GdocifyInlineScanError(
            f"Italic scan skipped: text length {len(text)} exceeds limit {limit}",
            context={"length": len(text), "limit": limit},
        )
    return [Italic(text=inner, start=start, end=end)
            for inner, start, end in _find_spans(_ITALIC_DELIMITERS, text)]


def _scan_links(text: str) -> list[InlineSpan]:
    return [
        Link(text=m.group("inner"), url=m.group("url"), start=m.start("inner"), end=m.end("inner"))
        for m in _LINK_RE.finditer(text)
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def scan_inline(
    text: str,
    config: GdocifyConfig | None = None,
    *,
    warnings: list[ConversionWarning] | None = None,
) -> list[InlineSpan]:
    """Return the inline spans of *text*: bold first, then italic, then links.

    Bold and italic spans may cover the same range; they are reported
    separately and never merged.

    Parameters
    ----------
    text:
        Rendered text of one heading, paragraph or list item.
    config:
        Supplies ``inline_scan_limit``.  Defaults apply when omitted.
    warnings:
        Optional mutable list that receives an ``INLINE_SCAN_SKIPPED``
        warning when italic detection gives up on this text.

    Returns
    -------
    list[InlineSpan]
    """
    limit = config.inline_scan_limit if config is not None else _DEFAULT_SCAN_LIMIT
    spans = _scan_bold(text)

    try:
        spans.extend(_scan_italic(text, limit))
    except GdocifyInlineScanError as exc:
        log.warning(
            "Italic detection skipped for block",
            extra=log_fields(op="scan_inline", **exc.context),
        )
        if warnings is not None:
            warnings.append(ConversionWarning(
                code="INLINE_SCAN_SKIPPED",
                message=exc.message,
                context=dict(exc.context),
            ))

    spans.extend(_scan_links(text))
    return spans
