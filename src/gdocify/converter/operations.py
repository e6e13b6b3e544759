"""Edit operations emitted by the converter and their wire form.

Each operation is a frozen dataclass.  :meth:`to_request` renders it in
the Google Docs ``documents.batchUpdate`` request vocabulary:

Insert::

    {"insertText": {"text": "Title\\n", "location": {"index": 1}}}

Paragraph style::

    {"updateParagraphStyle": {
        "paragraphStyle": {"namedStyleType": "HEADING_1"},
        "range": {"startIndex": 1, "endIndex": 6},
        "fields": "namedStyleType"}}

Text style::

    {"updateTextStyle": {
        "textStyle": {"bold": true},
        "range": {"startIndex": 3, "endIndex": 7},
        "fields": "bold"}}

Bullets::

    {"createParagraphBullets": {
        "range": {"startIndex": 1, "endIndex": 8},
        "bulletPreset": "BULLET_DISC_CIRCLE_SQUARE"}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class NamedStyle(str, Enum):
    """Google Docs named paragraph styles used by the converter."""

    NORMAL_TEXT = "NORMAL_TEXT"
    HEADING_1 = "HEADING_1"
    HEADING_2 = "HEADING_2"
    HEADING_3 = "HEADING_3"
    HEADING_4 = "HEADING_4"
    HEADING_5 = "HEADING_5"
    HEADING_6 = "HEADING_6"

    @classmethod
    def heading(cls, level: int) -> NamedStyle:
        """Return ``HEADING_<level>`` for ``1 <= level <= 6``."""
        if not 1 <= level <= 6:
            raise ValueError(f"heading level must be 1..6, got {level}")
        return cls(f"HEADING_{level}")


class BulletPreset(str, Enum):
    """List kinds and the Docs preset each one maps to."""

    BULLETED = "BULLETED"
    NUMBERED = "NUMBERED"

    @property
    def api_value(self) -> str:
        return _BULLET_PRESETS[self]


_BULLET_PRESETS: dict[BulletPreset, str] = {
    BulletPreset.BULLETED: "BULLET_DISC_CIRCLE_SQUARE",
    BulletPreset.NUMBERED: "NUMBERED_DECIMAL_ALPHA_ROMAN",
}


def _range(start: int, end: int) -> dict:
    return {"startIndex": start, "endIndex": end}


def _pt(magnitude: float) -> dict:
    return {"magnitude": magnitude, "unit": "PT"}


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsertText:
    """Insert ``text`` at document offset ``index``."""

    text: str
    index: int

    def to_request(self) -> dict:
        return {"insertText": {"text": self.text, "location": {"index": self.index}}}


@dataclass(frozen=True)
class Indent:
    """Paragraph indentation in points."""

    start_pt: float
    first_line_pt: float = 0.0


@dataclass(frozen=True)
class SetParagraphStyle:
    """Apply a named style *or* an indent to the paragraphs in a range."""

    start: int
    end: int
    named_style: NamedStyle | None = None
    indent: Indent | None = None

    def __post_init__(self) -> None:
        if (self.named_style is None) == (self.indent is None):
            raise ValueError("SetParagraphStyle needs exactly one of named_style or indent")

    def to_request(self) -> dict:
        if self.named_style is not None:
            style: dict = {"namedStyleType": self.named_style.value}
            fields = "namedStyleType"
        else:
            assert self.indent is not None
            style = {
                "indentStart": _pt(self.indent.start_pt),
                "indentFirstLine": _pt(self.indent.first_line_pt),
            }
            fields = "indentStart,indentFirstLine"
        return {
            "updateParagraphStyle": {
                "paragraphStyle": style,
                "range": _range(self.start, self.end),
                "fields": fields,
            }
        }


@dataclass(frozen=True)
class SetTextStyle:
    """Apply character formatting to a range.  Unset attributes are left
    untouched by the API (they are omitted from ``fields``).
    """

    start: int
    end: int
    bold: bool | None = None
    italic: bool | None = None
    link: str | None = None
    font_family: str | None = None
    background_color: tuple[float, float, float] | None = None

    def to_request(self) -> dict:
        style: dict = {}
        fields: list[str] = []
        if self.bold is not None:
            style["bold"] = self.bold
            fields.append("bold")
        if self.italic is not None:
            style["italic"] = self.italic
            fields.append("italic")
        if self.link is not None:
            style["link"] = {"url": self.link}
            fields.append("link")
        if self.font_family is not None:
            style["weightedFontFamily"] = {"fontFamily": self.font_family}
            fields.append("weightedFontFamily")
        if self.background_color is not None:
            red, green, blue = self.background_color
            style["backgroundColor"] = {
                "color": {"rgbColor": {"red": red, "green": green, "blue": blue}}
            }
            fields.append("backgroundColor")
        return {
            "updateTextStyle": {
                "textStyle": style,
                "range": _range(self.start, self.end),
                "fields": ",".join(fields),
            }
        }


@dataclass(frozen=True)
class ApplyListBullet:
    """Turn the paragraphs in a range into list items."""

    preset: BulletPreset
    start: int
    end: int

    def to_request(self) -> dict:
        return {
            "createParagraphBullets": {
                "range": _range(self.start, self.end),
                "bulletPreset": self.preset.api_value,
            }
        }


Operation = Union[InsertText, SetParagraphStyle, SetTextStyle, ApplyListBullet]
RangedOperation = Union[SetParagraphStyle, SetTextStyle, ApplyListBullet]


def doc_length(text: str) -> int:
    """Length of *text* in Google Docs index units (UTF-16 code units)."""
    return len(text.encode("utf-16-le")) // 2
