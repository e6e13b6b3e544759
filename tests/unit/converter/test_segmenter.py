"""Tests for the line-oriented block segmenter."""

from __future__ import annotations

from gdocify.converter.segmenter import segment
from gdocify.models import (
    BlankLine,
    CodeBlock,
    Heading,
    Image,
    ListItem,
    Paragraph,
)


class TestLineHandling:

    def test_empty_source_yields_no_blocks(self):
        assert segment("") == []

    def test_every_line_is_its_own_paragraph(self):
        assert segment("first\nsecond") == [Paragraph("first"), Paragraph("second")]

    def test_single_trailing_newline_is_ignored(self):
        assert segment("text\n") == [Paragraph("text")]

    def test_second_trailing_newline_is_a_blank_line(self):
        assert segment("text\n\n") == [Paragraph("text"), BlankLine()]

    def test_blank_line_between_paragraphs(self):
        assert segment("a\n\nb") == [Paragraph("a"), BlankLine(), Paragraph("b")]

    def test_whitespace_only_line_is_blank(self):
        assert segment("a\n   \nb") == [Paragraph("a"), BlankLine(), Paragraph("b")]

    def test_crlf_and_cr_line_endings(self):
        assert segment("a\r\nb\rc") == [Paragraph("a"), Paragraph("b"), Paragraph("c")]

    def test_segmenting_twice_gives_identical_blocks(self):
        source = "# T\n- a\n1. b\n```\ncode\n```\n![x](y)\n\ntext"
        assert segment(source) == segment(source)


class TestHeadings:

    def test_heading_levels(self):
        blocks = segment("# One\n## Two\n###### Six")
        assert blocks == [Heading(1, "One"), Heading(2, "Two"), Heading(6, "Six")]

    def test_hash_without_space_is_paragraph(self):
        assert segment("#hashtag") == [Paragraph("#hashtag")]

    def test_seven_hashes_is_paragraph(self):
        assert segment("####### too deep") == [Paragraph("####### too deep")]

    def test_heading_wins_over_list_marker(self):
        assert segment("# - item") == [Heading(1, "- item")]


class TestCodeFences:

    def test_fenced_block_with_language(self):
        blocks = segment("```python\nx = 1\ny = 2\n```\nafter")
        assert blocks == [
            CodeBlock(language="python", text="x = 1\ny = 2\n"),
            Paragraph("after"),
        ]

    def test_fence_without_language(self):
        assert segment("```\ncode\n```") == [CodeBlock(language=None, text="code\n")]

    def test_empty_fence(self):
        assert segment("```\n```") == [CodeBlock(language=None, text="\n")]

    def test_unterminated_fence_consumes_rest(self):
        blocks = segment("intro\n```\ncode\n# not a heading")
        assert blocks == [
            Paragraph("intro"),
            CodeBlock(language=None, text="code\n# not a heading\n"),
        ]

    def test_markdown_inside_fence_is_verbatim(self):
        blocks = segment("```\n- item\n**bold**\n\n```")
        assert blocks == [CodeBlock(language=None, text="- item\n**bold**\n\n")]

    def test_fence_with_info_string_does_not_close(self):
        blocks = segment("```\nStart a block with:\n```python\nprint(1)\n```\nafter")
        assert blocks == [
            CodeBlock(language=None, text="Start a block with:\n```python\nprint(1)\n"),
            Paragraph("after"),
        ]

    def test_longer_backtick_run_closes(self):
        assert segment("```\nx\n`````\ny") == [
            CodeBlock(language=None, text="x\n"),
            Paragraph("y"),
        ]

    def test_indented_fence_is_recognised(self):
        blocks = segment("  ```sh\nls\n  ```")
        assert blocks == [CodeBlock(language="sh", text="ls\n")]


class TestLists:

    def test_bullet_items(self):
        assert segment("- a\n- b") == [
            ListItem(ordered=False, ordinal=1, indent_depth=0, text="a"),
            ListItem(ordered=False, ordinal=2, indent_depth=0, text="b"),
        ]

    def test_ordered_items_are_renumbered(self):
        blocks = segment("1. a\n2. b\n3. c")
        assert [b.ordinal for b in blocks] == [1, 2, 3]
        assert all(b.ordered for b in blocks)

    def test_source_numbers_are_ignored(self):
        blocks = segment("5. a\n9. b\n1. c")
        assert [b.ordinal for b in blocks] == [1, 2, 3]
        assert [b.text for b in blocks] == ["a", "b", "c"]

    def test_bullet_resets_ordered_counter(self):
        blocks = segment("1. a\n2. b\n- x\n1. c")
        assert [(b.ordered, b.ordinal) for b in blocks] == [
            (True, 1), (True, 2), (False, 1), (True, 1),
        ]

    def test_paragraph_does_not_reset_ordered_counter(self):
        blocks = segment("1. a\ntext\n\n1. b")
        ordered = [b for b in blocks if isinstance(b, ListItem)]
        assert [b.ordinal for b in ordered] == [1, 2]

    def test_indent_depth_counts_leading_whitespace(self):
        blocks = segment("- top\n  - nested\n\t1. tabbed")
        assert [b.indent_depth for b in blocks] == [0, 2, 1]

    def test_dash_without_space_is_paragraph(self):
        assert segment("-dash") == [Paragraph("-dash")]


class TestImages:

    def test_image_line(self):
        assert segment("![a cat](https://x.test/cat.png)") == [
            Image(alt="a cat", url="https://x.test/cat.png"),
        ]

    def test_image_with_title(self):
        assert segment('![alt](pic.png "Title")') == [Image(alt="alt", url="pic.png")]

    def test_image_inside_text_stays_paragraph(self):
        assert segment("see ![a](b.png) here") == [Paragraph("see ![a](b.png) here")]
