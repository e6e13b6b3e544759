"""Tests for the block-to-operation emitter."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from gdocify.config import DEFAULT_CODE_BACKGROUND, GdocifyConfig
from gdocify.converter.emitter import _EmitContext, emit
from gdocify.converter.operations import (
    ApplyListBullet,
    BulletPreset,
    Indent,
    InsertText,
    NamedStyle,
    SetParagraphStyle,
    SetTextStyle,
    doc_length,
)
from gdocify.converter.segmenter import segment
from gdocify.errors import GdocifyConversionFailedError, GdocifyUnsupportedElementError
from gdocify.models import BlankLine, Heading, Paragraph


def ops_for(markdown: str, **config_kwargs):
    return emit(segment(markdown), GdocifyConfig(**config_kwargs)).operations


class TestHeadings:

    def test_title_heading(self):
        assert ops_for("# Title\n") == [
            InsertText("Title\n", 1),
            SetParagraphStyle(start=1, end=6, named_style=NamedStyle.HEADING_1),
        ]

    def test_heading_with_bold(self):
        ops = ops_for("## a **b**")
        assert ops[1] == SetParagraphStyle(start=1, end=8, named_style=NamedStyle.HEADING_2)
        assert ops[2] == SetTextStyle(start=5, end=6, bold=True)


class TestParagraphs:

    def test_plain_paragraph_is_a_single_insert(self):
        assert ops_for("hello") == [InsertText("hello\n", 1)]

    def test_reset_paragraph_style(self):
        assert ops_for("hello", reset_paragraph_style=True) == [
            InsertText("hello\n", 1),
            SetParagraphStyle(start=1, end=6, named_style=NamedStyle.NORMAL_TEXT),
        ]

    def test_bold_and_italic_over_same_range(self):
        assert ops_for("***wow***") == [
            InsertText("***wow***\n", 1),
            SetTextStyle(start=4, end=7, bold=True),
            SetTextStyle(start=4, end=7, italic=True),
        ]

    def test_link_covers_display_text(self):
        assert ops_for("[go](http://x)") == [
            InsertText("[go](http://x)\n", 1),
            SetTextStyle(start=2, end=4, link="http://x"),
        ]

    def test_offsets_use_utf16_units(self):
        ops = ops_for("😀 **b**")
        assert ops[1] == SetTextStyle(start=6, end=7, bold=True)

    def test_blank_line_inserts_newline(self):
        assert ops_for("a\n\nb") == [
            InsertText("a\n", 1),
            InsertText("\n", 3),
            InsertText("b\n", 4),
        ]


class TestListItems:

    def test_bullet_item(self):
        assert ops_for("- item") == [
            InsertText("• item\n", 1),
            ApplyListBullet(BulletPreset.BULLETED, 1, 7),
        ]

    def test_custom_bullet_glyph(self):
        ops = ops_for("- item", bullet_glyph="* ")
        assert ops[0] == InsertText("* item\n", 1)

    def test_ordered_items_are_numbered_in_text(self):
        assert ops_for("1. a\n7. b") == [
            InsertText("1. a\n", 1),
            ApplyListBullet(BulletPreset.NUMBERED, 1, 5),
            InsertText("2. b\n", 6),
            ApplyListBullet(BulletPreset.NUMBERED, 6, 10),
        ]

    def test_nested_item_is_indented(self):
        ops = ops_for("  - x")
        assert ops == [
            InsertText("• x\n", 1),
            ApplyListBullet(BulletPreset.BULLETED, 1, 4),
            SetParagraphStyle(start=1, end=4, indent=Indent(start_pt=36.0)),
        ]

    def test_inline_spans_are_offset_past_prefix(self):
        ops = ops_for("- **b**")
        assert ops[-1] == SetTextStyle(start=5, end=6, bold=True)


class TestCodeBlocks:

    def test_code_is_inserted_verbatim_with_code_style(self):
        assert ops_for("```\nx **y**\n```") == [
            InsertText("x **y**\n", 1),
            SetTextStyle(
                start=1,
                end=9,
                font_family="Courier New",
                background_color=DEFAULT_CODE_BACKGROUND,
            ),
        ]

    def test_custom_code_font(self):
        ops = ops_for("```\nx\n```", code_font_family="Roboto Mono")
        assert ops[1].font_family == "Roboto Mono"


class TestImages:

    def test_placeholder_uses_alt_text(self):
        result = emit(segment("![cat](http://c.test/cat.png)"))
        assert result.operations == [InsertText("[Image: cat]\n", 1)]
        assert [w.code for w in result.warnings] == ["UNSUPPORTED_ELEMENT"]
        assert result.warnings[0].context["src"] == "http://c.test/cat.png"

    def test_placeholder_falls_back_to_url(self):
        result = emit(segment("![](http://c.test/cat.png)"))
        assert result.operations == [InsertText("[Image: http://c.test/cat.png]\n", 1)]

    def test_skip_policy(self):
        result = emit(segment("![cat](c.png)"), GdocifyConfig(unsupported_element_policy="skip"))
        assert result.operations == []
        assert len(result.warnings) == 1

    def test_raise_policy(self):
        with pytest.raises(GdocifyUnsupportedElementError) as exc_info:
            emit(
                [Paragraph("a"), *segment("![cat](c.png)")],
                GdocifyConfig(unsupported_element_policy="raise"),
            )
        assert exc_info.value.context["block_index"] == 1

    def test_unknown_block_type_is_unsupported(self):
        with pytest.raises(GdocifyUnsupportedElementError):
            emit([object()], GdocifyConfig(unsupported_element_policy="raise"))


class TestCursor:

    def test_end_index_is_total_inserted_length_plus_one(self):
        result = emit(segment("# T\n- a\n1. b\n```\nc\n```\n\nplain é😀"))
        inserted = sum(
            doc_length(op.text) for op in result.operations if isinstance(op, InsertText)
        )
        assert result.end_index == inserted + 1

    def test_empty_input(self):
        result = emit([])
        assert result.operations == []
        assert result.end_index == 1

    def test_blocks_are_emitted_in_order(self):
        result = emit([Heading(1, "A"), BlankLine(), Paragraph("B")])
        inserts = [op for op in result.operations if isinstance(op, InsertText)]
        assert [(op.text, op.index) for op in inserts] == [("A\n", 1), ("\n", 3), ("B\n", 4)]


class TestFailures:

    def test_internal_fault_is_wrapped_with_block_index(self):
        with patch(
            "gdocify.converter.emitter.scan_inline", side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(GdocifyConversionFailedError) as exc_info:
                emit([BlankLine(), Paragraph("x")])
        err = exc_info.value
        assert err.context["block_index"] == 1
        assert err.context["block_type"] == "Paragraph"
        assert isinstance(err.cause, RuntimeError)

    def test_range_past_cursor_is_rejected(self):
        ctx = _EmitContext(GdocifyConfig())
        ctx.block_index = 3
        ctx.insert("ab\n")
        with pytest.raises(GdocifyConversionFailedError) as exc_info:
            ctx.add(SetTextStyle(start=2, end=10, bold=True))
        assert exc_info.value.context["block_index"] == 3
        assert exc_info.value.context["op"] == "SetTextStyle"
        assert exc_info.value.context["cursor"] == 4

    def test_range_before_first_index_is_rejected(self):
        ctx = _EmitContext(GdocifyConfig())
        ctx.insert("ab\n")
        with pytest.raises(GdocifyConversionFailedError):
            ctx.add(ApplyListBullet(BulletPreset.BULLETED, 0, 2))

    def test_range_ending_at_cursor_is_accepted(self):
        ctx = _EmitContext(GdocifyConfig())
        ctx.insert("ab\n")
        ctx.add(SetTextStyle(start=1, end=4, bold=True))
        assert len(ctx.operations) == 2
