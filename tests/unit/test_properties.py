"""Property-based tests for the gdocify converter using Hypothesis.

These tests verify the cursor and ordering invariants of the edit script
over a wide range of randomly generated Markdown-like inputs.
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from gdocify.converter.emitter import emit
from gdocify.converter.inline_scanner import scan_inline
from gdocify.converter.md_to_docs import markdown_to_requests
from gdocify.converter.operations import InsertText, doc_length
from gdocify.converter.segmenter import segment
from gdocify.models import ListItem

# ---------------------------------------------------------------------------
# Reusable strategies
# ---------------------------------------------------------------------------

# Characters that exercise every block and inline rule, plus non-BMP text.
_markdown_chars = st.sampled_from(list("ab #-*_[]()!`1.\n \t\ré😀"))
_markdown_st = st.text(alphabet=_markdown_chars, max_size=300)

_line_st = st.sampled_from([
    "# Heading",
    "### **bold** heading",
    "- item",
    "  - nested *item*",
    "3. ordered",
    "```",
    "```py",
    "![alt](img.png)",
    "",
    "plain [link](http://x) text",
    "***both*** and __strong__",
    "emoji 😀 **b**",
])
_document_st = st.lists(_line_st, max_size=30).map("\n".join)


def _check_cursor(operations) -> int:
    """Replay *operations*; return the final cursor."""
    cursor = 1
    for op in operations:
        if isinstance(op, InsertText):
            assert op.index == cursor
            cursor += doc_length(op.text)
        else:
            assert 1 <= op.start <= op.end <= cursor
    return cursor


class TestSegmenterProperties:

    @given(_markdown_st)
    def test_segmenting_is_deterministic(self, source):
        assert segment(source) == segment(source)

    @given(st.lists(st.integers(min_value=0, max_value=999), min_size=1, max_size=20))
    def test_ordered_ordinals_are_consecutive(self, numbers):
        source = "\n".join(f"{n}. item" for n in numbers)
        blocks = segment(source)
        assert [b.ordinal for b in blocks] == list(range(1, len(numbers) + 1))
        assert all(isinstance(b, ListItem) and b.ordered for b in blocks)


class TestEmitterProperties:

    @settings(max_examples=200)
    @given(_markdown_st)
    def test_ranges_never_pass_the_cursor(self, source):
        result = emit(segment(source))
        assert _check_cursor(result.operations) == result.end_index

    @given(_document_st)
    def test_ranges_never_pass_the_cursor_for_documents(self, source):
        result = emit(segment(source))
        assert _check_cursor(result.operations) == result.end_index

    @given(_document_st)
    def test_inserted_length_matches_end_index(self, source):
        result = emit(segment(source))
        inserted = sum(
            doc_length(op.text) for op in result.operations if isinstance(op, InsertText)
        )
        assert result.end_index - 1 == inserted

    @given(_markdown_st)
    def test_conversion_is_idempotent(self, source):
        assert markdown_to_requests(source) == markdown_to_requests(source)


class TestInlineProperties:

    @given(st.text(alphabet=st.sampled_from(list("ab *_[]()!")), max_size=80))
    def test_spans_lie_inside_text(self, text):
        for span in scan_inline(text):
            assert 0 <= span.start <= span.end <= len(text)
            assert text[span.start:span.end] == span.text
