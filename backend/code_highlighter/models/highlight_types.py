"""
Highlight Type Models

Pydantic models for positions, ranges and highlight records.
Positions are 0-based (line, character) pairs compared lexicographically;
ranges are half-open, so the end position itself is not covered.

Field names serialize to the camelCase keys of the persisted/exported
schema (``filePath``) while Python code uses snake_case.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    model_validator,
)


class Position(BaseModel):
    """A (line, character) location inside a document"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    line: NonNegativeInt
    character: NonNegativeInt

    def _key(self) -> tuple[int, int]:
        return (self.line, self.character)

    def __lt__(self, other: Position) -> bool:
        return self._key() < other._key()

    def __le__(self, other: Position) -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: Position) -> bool:
        return self._key() > other._key()

    def __ge__(self, other: Position) -> bool:
        return self._key() >= other._key()

    def is_before(self, other: Position) -> bool:
        return self < other

    def is_after_or_equal(self, other: Position) -> bool:
        return self >= other


class Range(BaseModel):
    """
    A half-open span of text from ``start`` (inclusive) to ``end`` (exclusive).

    Reversed input (an editor selection made from right to left) is
    normalised so that ``start <= end`` always holds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: Position
    end: Position

    @model_validator(mode="before")
    @classmethod
    def _order_positions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        start, end = data.get("start"), data.get("end")
        if start is None or end is None:
            return data
        try:
            start = Position.model_validate(start)
            end = Position.model_validate(end)
        except ValidationError:
            # Leave malformed input for the field validation to report
            return data
        if end < start:
            start, end = end, start
        return {**data, "start": start, "end": end}

    @classmethod
    def from_coordinates(
        cls, start_line: int, start_character: int, end_line: int, end_character: int
    ) -> Range:
        return cls(
            start=Position(line=start_line, character=start_character),
            end=Position(line=end_line, character=end_character),
        )

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def line_span(self) -> int:
        """Number of lines touched by the range (a single-line range spans 1)."""
        return self.end.line - self.start.line + 1

    def contains(self, position: Position) -> bool:
        return self.start <= position < self.end

    def intersects(self, other: Range) -> bool:
        return self.start < other.end and other.start < self.end

    def shift_lines(self, delta: int, after_line: int | None = None) -> Range:
        """
        Move both boundaries by ``delta`` lines, keeping their columns.

        When ``after_line`` is given, ranges starting before that line are
        returned unchanged.
        """
        if delta == 0:
            return self
        if after_line is not None and self.start.line < after_line:
            return self
        return Range(
            start=Position(line=self.start.line + delta, character=self.start.character),
            end=Position(line=self.end.line + delta, character=self.end.character),
        )

    def describe(self) -> str:
        return (
            f"{self.start.line}:{self.start.character}-"
            f"{self.end.line}:{self.end.character}"
        )


class Highlight(BaseModel):
    """A colored, optionally commented text range in one file"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: str = Field(min_length=1)
    file_path: str = Field(alias="filePath", min_length=1)
    range: Range
    text: str
    comment: str | None = None
    color: str
    timestamp: int

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted/exported JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TextChange(BaseModel):
    """One edit of a document: ``range`` was replaced by ``text``"""

    range: Range
    text: str = ""

    @property
    def line_delta(self) -> int:
        """Net number of lines the edit adds (negative when lines were removed)."""
        return self.text.count("\n") - (self.range.line_span - 1)
