"""Offset ranges into the URI being parsed."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` range of code-point offsets into a source string."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span ({self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def text(self, source: str) -> str:
        """Slice the spanned text out of source."""
        return source[self.start : self.end]

    def strip(self, source: str) -> Span:
        """Narrow the span past leading and trailing whitespace."""
        start, end = self.start, self.end
        while start < end and source[start].isspace():
            start += 1
        while end > start and source[end - 1].isspace():
            end -= 1
        return Span(start, end)

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)
