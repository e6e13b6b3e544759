"""Turn a block stream into an ordered Google Docs edit script.

The emitter walks the blocks once, threading a cursor that always points
at the next insertion offset.  The cursor starts at ``1`` (offset ``0``
is the document start) and moves only when text is inserted, by the
inserted length in UTF-16 code units.  Style operations never move it.

Per block:

- blank line -> ``"\\n"``
- heading -> text + newline, ``HEADING_<n>`` paragraph style, inline styles
- paragraph -> text + newline, optional ``NORMAL_TEXT``, inline styles
- list item -> prefix + text + newline, bullets, optional indent,
  inline styles
- code block -> verbatim text, monospace font and background
- image -> ``[Image: <alt-or-url>]`` placeholder (see
  ``unsupported_element_policy``)

Every ranged operation is checked against the cursor when it is added.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from collections.abc import Sequence

from gdocify.config import GdocifyConfig
from gdocify.converter.inline_scanner import scan_inline
from gdocify.converter.operations import (
    ApplyListBullet,
    BulletPreset,
    Indent,
    InsertText,
    NamedStyle,
    Operation,
    RangedOperation,
    SetParagraphStyle,
    SetTextStyle,
    doc_length,
)
from gdocify.errors import (
    GdocifyConversionFailedError,
    GdocifyError,
    GdocifyUnsupportedElementError,
)
from gdocify.models import (
    BlankLine,
    Block,
    Bold,
    CodeBlock,
    ConversionResult,
    ConversionWarning,
    Heading,
    Image,
    Italic,
    Link,
    ListItem,
    Paragraph,
)

FIRST_INDEX = 1
"""Offset of the first insertion in an empty document."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def emit(blocks: Sequence[Block], config: GdocifyConfig | None = None) -> ConversionResult:
    """Convert *blocks* into edit operations.

    Parameters
    ----------
    blocks:
        Output of :func:`gdocify.converter.segmenter.segment`.
    config:
        Rendering options.  Defaults apply when omitted.

    Returns
    -------
    ConversionResult
        The operations, any non-fatal warnings, and the final cursor.

    Raises
    ------
    GdocifyConversionFailedError
        If any block could not be emitted.  ``context["block_index"]``
        names the block.  Nothing is returned in that case.
    GdocifyUnsupportedElementError
        If an unsupported element is met and the policy is ``"raise"``.
    """
    ctx = _EmitContext(config or GdocifyConfig())
    for index, block in enumerate(blocks):
        ctx.block_index = index
        handler = _BLOCK_HANDLERS.get(type(block))
        try:
            if handler is None:
                _emit_unsupported(ctx, type(block).__name__, type(block).__name__)
            else:
                handler(block, ctx)
        except GdocifyError:
            raise
        except Exception as exc:
            raise GdocifyConversionFailedError(
                f"Failed to emit block {index} ({type(block).__name__}): {exc}",
                context={"block_index": index, "block_type": type(block).__name__},
                cause=exc,
            ) from exc
    return ConversionResult(
        operations=ctx.operations,
        warnings=ctx.warnings,
        end_index=ctx.cursor,
    )


class _EmitContext:
    """Mutable accumulator for one emission pass."""

    __slots__ = ("block_index", "config", "cursor", "operations", "warnings")

    def __init__(self, config: GdocifyConfig) -> None:
        self.config = config
        self.cursor = FIRST_INDEX
        self.block_index = 0
        self.operations: list[Operation] = []
        self.warnings: list[ConversionWarning] = []

    def insert(self, text: str) -> int:
        """Insert *text* at the cursor; return the offset it starts at."""
        start = self.cursor
        self.operations.append(InsertText(text=text, index=start))
        self.cursor += doc_length(text)
        return start

    def add(self, op: RangedOperation) -> None:
        """Append a ranged operation after checking it against the cursor."""
        if not FIRST_INDEX <= op.start <= op.end <= self.cursor:
            raise GdocifyConversionFailedError(
                f"Operation range [{op.start}, {op.end}) is outside the inserted "
                f"text [{FIRST_INDEX}, {self.cursor}) at block {self.block_index}",
                context={
                    "block_index": self.block_index,
                    "op": type(op).__name__,
                    "start": op.start,
                    "end": op.end,
                    "cursor": self.cursor,
                },
            )
        self.operations.append(op)

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


# ---------------------------------------------------------------------------
# Inline styles
# ---------------------------------------------------------------------------

def _style_inline(text: str, base: int, ctx: _EmitContext) -> None:
    """Emit one text-style operation per inline span of *text*.

    *base* is the document offset of ``text[0]``.
    """
    for span in scan_inline(text, ctx.config, warnings=ctx.warnings):
        start = base + doc_length(text[:span.start])
        end = base + doc_length(text[:span.end])
        if isinstance(span, Bold):
            ctx.add(SetTextStyle(start=start, end=end, bold=True))
        elif isinstance(span, Italic):
            ctx.add(SetTextStyle(start=start, end=end, italic=True))
        elif isinstance(span, Link):
            ctx.add(SetTextStyle(start=start, end=end, link=span.url))


# ---------------------------------------------------------------------------
# Block handlers
# ---------------------------------------------------------------------------

def _emit_blank_line(block: BlankLine, ctx: _EmitContext) -> None:
    ctx.insert("\n")


def _emit_heading(block: Heading, ctx: _EmitContext) -> None:
    start = ctx.insert(block.text + "\n")
    ctx.add(SetParagraphStyle(
        start=start,
        end=start + doc_length(block.text),
        named_style=NamedStyle.heading(block.level),
    ))
    _style_inline(block.text, start, ctx)


def _emit_paragraph(block: Paragraph, ctx: _EmitContext) -> None:
    start = ctx.insert(block.text + "\n")
    if ctx.config.reset_paragraph_style:
        ctx.add(SetParagraphStyle(
            start=start,
            end=start + doc_length(block.text),
            named_style=NamedStyle.NORMAL_TEXT,
        ))
    _style_inline(block.text, start, ctx)


def _emit_list_item(block: ListItem, ctx: _EmitContext) -> None:
    prefix = f"{block.ordinal}. " if block.ordered else ctx.config.bullet_glyph
    body = prefix + block.text
    start = ctx.insert(body + "\n")
    end = start + doc_length(body)
    preset = BulletPreset.NUMBERED if block.ordered else BulletPreset.BULLETED
    ctx.add(ApplyListBullet(preset=preset, start=start, end=end))
    if block.indent_depth > 0:
        ctx.add(SetParagraphStyle(
            start=start,
            end=end,
            indent=Indent(start_pt=ctx.config.list_indent_pt * block.indent_depth),
        ))
    _style_inline(block.text, start + doc_length(prefix), ctx)


def _emit_code_block(block: CodeBlock, ctx: _EmitContext) -> None:
    # Code text already ends with a newline.
    start = ctx.insert(block.text)
    ctx.add(SetTextStyle(
        start=start,
        end=start + doc_length(block.text),
        font_family=ctx.config.code_font_family,
        background_color=ctx.config.code_background,
    ))


def _emit_image(block: Image, ctx: _EmitContext) -> None:
    _emit_unsupported(ctx, "image", block.alt or block.url, src=block.url)


def _emit_unsupported(ctx: _EmitContext, element: str, label: str, **context: object) -> None:
    policy = ctx.config.unsupported_element_policy
    if policy == "raise":
        raise GdocifyUnsupportedElementError(
            f"Element '{element}' at block {ctx.block_index} cannot be rendered",
            context={"block_index": ctx.block_index, "element": element, **context},
        )
    ctx.add_warning(
        "UNSUPPORTED_ELEMENT",
        f"Element '{element}' has no native rendering; "
        + ("a placeholder was inserted." if policy == "placeholder" else "it was skipped."),
        block_index=ctx.block_index,
        element=element,
        **context,
    )
    if policy == "placeholder":
        title = "Image" if element == "image" else element
        ctx.insert(f"[{title}: {label}]\n")


_BlockHandler = _Callable[..., None]

_BLOCK_HANDLERS: dict[type, _BlockHandler] = {
    BlankLine: _emit_blank_line,
    Heading: _emit_heading,
    Paragraph: _emit_paragraph,
    ListItem: _emit_list_item,
    CodeBlock: _emit_code_block,
    Image: _emit_image,
}
