"""Split Markdown source into a flat stream of typed blocks.

The segmenter is line oriented.  Each source line is classified on its
own, in priority order (first match wins):

1. ATX heading (``# Title`` .. ``###### Title``)
2. code fence opener (````` ``` `````), which swallows every line up to
   and including the closing fence
3. unordered list item (``- text``)
4. ordered list item (``1. text``)
5. a line holding only an image (``![alt](url)``)
6. blank line
7. paragraph

Consecutive text lines are *not* joined: every line is its own
paragraph block.  List numbering is a running counter kept in the loop
state of :func:`segment`, so the function is reentrant.
"""

from __future__ import annotations

import re

from gdocify.models import (
    BlankLine,
    Block,
    CodeBlock,
    Heading,
    Image,
    ListItem,
    Paragraph,
)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_BULLET_RE = re.compile(r"^(\s*)-\s+(.+)$")
_ORDERED_RE = re.compile(r"^(\s*)\d+\.\s+(.+)$")
_IMAGE_RE = re.compile(r"""^\s*!\[([^\]]*)\]\(\s*([^)\s]*)(?:\s+"[^"]*")?\s*\)\s*$""")

_FENCE = "```"


def _split_lines(source: str) -> list[str]:
    """Normalise line endings and split, ignoring one trailing newline."""
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _is_fence(line: str) -> bool:
    return line.strip().startswith(_FENCE)


def _is_closing_fence(line: str) -> bool:
    """A closing fence is a bare backtick run; an info string never closes."""
    marker = line.strip()
    return len(marker) >= len(_FENCE) and marker == "`" * len(marker)


def segment(source: str) -> list[Block]:
    """Classify *source* into blocks.

    Parameters
    ----------
    source:
        Raw Markdown text.

    Returns
    -------
    list[Block]
        Blocks in source order.  Every source line belongs to exactly one
        block.
    """
    lines = _split_lines(source)
    blocks: list[Block] = []
    bullets_seen = 0
    numbers_seen = 0
    i = 0

    while i < len(lines):
        line = lines[i]
        i += 1

        m = _HEADING_RE.match(line)
        if m:
            blocks.append(Heading(level=len(m.group(1)), text=m.group(2)))
            continue

        if _is_fence(line):
            language = line.strip()[len(_FENCE):].strip() or None
            body: list[str] = []
            while i < len(lines) and not _is_closing_fence(lines[i]):
                body.append(lines[i])
                i += 1
            # Skip the closing fence; an unterminated fence ends at EOF.
            i += 1
            blocks.append(CodeBlock(language=language, text="\n".join(body) + "\n"))
            continue

        m = _BULLET_RE.match(line)
        if m:
            bullets_seen += 1
            # A bullet item ends the current numbered run.
            numbers_seen = 0
            blocks.append(ListItem(
                ordered=False,
                ordinal=bullets_seen,
                indent_depth=len(m.group(1)),
                text=m.group(2),
            ))
            continue

        m = _ORDERED_RE.match(line)
        if m:
            numbers_seen += 1
            blocks.append(ListItem(
                ordered=True,
                ordinal=numbers_seen,
                indent_depth=len(m.group(1)),
                text=m.group(2),
            ))
            continue

        m = _IMAGE_RE.match(line)
        if m:
            blocks.append(Image(alt=m.group(1), url=m.group(2)))
            continue

        if not line.strip():
            blocks.append(BlankLine())
            continue

        blocks.append(Paragraph(text=line))

    return blocks
