"""Highlight segments for overlaying error ranges on the input (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from core.models import ErrorRange

MARK_PLACEHOLDER = " "


class SegmentKind(str, Enum):
    TEXT = "text"
    MARK = "mark"
    BREAK = "break"


@dataclass(frozen=True)
class Segment:
    """A slice of the input, either plain or marked as erroneous."""

    kind: SegmentKind
    text: str

    @property
    def display(self) -> str:
        # Empty marks still need one visible cell.
        if self.kind is SegmentKind.MARK and not self.text:
            return MARK_PLACEHOLDER
        return self.text


def build_segments(text: str, ranges: Iterable[ErrorRange]) -> list[Segment]:
    """Split ``text`` into plain and marked segments.

    Rules:
    - Without ranges the whole text is one plain segment.
    - Ranges are sorted by start and clamped to the text; ``end < start`` is
      treated as zero-width.
    - Overlaps are trimmed so every character is emitted exactly once, and a
      range entirely inside text already emitted is dropped.
    - A trailing newline gets an extra BREAK segment so the overlay keeps the
      same number of lines as the input widget.
    """

    ordered = sorted(ranges, key=lambda item: (item.start, item.end))
    if not ordered:
        return [Segment(SegmentKind.TEXT, text)]

    size = len(text)
    segments: list[Segment] = []
    last_index = 0
    for item in ordered:
        start = min(max(item.start, 0), size)
        end = min(max(item.end, start), size)
        if start < last_index:
            if end <= last_index:
                continue
            start = last_index
        if start > last_index:
            segments.append(Segment(SegmentKind.TEXT, text[last_index:start]))
        segments.append(Segment(SegmentKind.MARK, text[start:end]))
        last_index = end

    if last_index < size:
        segments.append(Segment(SegmentKind.TEXT, text[last_index:]))
    if text.endswith("\n"):
        segments.append(Segment(SegmentKind.BREAK, ""))
    return segments


def join_segments(segments: Iterable[Segment]) -> str:
    """Reassemble the original text from segments."""

    return "".join(segment.text for segment in segments)
