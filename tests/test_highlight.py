from __future__ import annotations

from core.highlight import MARK_PLACEHOLDER, Segment, SegmentKind, build_segments, join_segments
from core.models import AnalysisMode, ErrorRange
from core.validation import validate


def test_no_ranges_is_single_plain_segment() -> None:
    text = "a,b\n1,2\n"
    assert build_segments(text, []) == [Segment(SegmentKind.TEXT, text)]


def test_marks_and_gaps() -> None:
    text = "hello world"
    segments = build_segments(text, [ErrorRange(6, 11), ErrorRange(0, 1)])
    assert segments == [
        Segment(SegmentKind.MARK, "h"),
        Segment(SegmentKind.TEXT, "ello "),
        Segment(SegmentKind.MARK, "world"),
    ]
    assert join_segments(segments) == text


def test_overlapping_ranges_cover_each_character_once() -> None:
    text = "0123456789"
    segments = build_segments(text, [ErrorRange(5, 8), ErrorRange(2, 6), ErrorRange(3, 4)])
    assert join_segments(segments) == text
    assert segments == [
        Segment(SegmentKind.TEXT, "01"),
        Segment(SegmentKind.MARK, "2345"),
        Segment(SegmentKind.MARK, "67"),
        Segment(SegmentKind.TEXT, "89"),
    ]


def test_order_of_input_ranges_does_not_matter() -> None:
    text = "abcdefgh"
    ranges = [ErrorRange(1, 3), ErrorRange(5, 7)]
    assert build_segments(text, ranges) == build_segments(text, list(reversed(ranges)))


def test_zero_width_and_out_of_bounds_marks_stay_visible() -> None:
    text = "[1,"
    segments = build_segments(text, [ErrorRange(3, 4)])
    assert segments[-1] == Segment(SegmentKind.MARK, "")
    assert segments[-1].display == MARK_PLACEHOLDER
    assert join_segments(segments) == text


def test_inverted_and_negative_ranges_do_not_crash() -> None:
    text = "abcdef"
    segments = build_segments(text, [ErrorRange(4, 2), ErrorRange(-5, 1), ErrorRange(50, 60)])
    assert join_segments(segments) == text
    assert Segment(SegmentKind.MARK, "a") in segments
    marks = [segment for segment in segments if segment.kind is SegmentKind.MARK]
    assert len(marks) == 3


def test_trailing_newline_adds_break_segment() -> None:
    text = "a,b,c\n1,2\n"
    outcome = validate(text, AnalysisMode.QUANTUM)
    segments = build_segments(text, outcome.ranges)
    assert segments[-1] == Segment(SegmentKind.BREAK, "")
    assert Segment(SegmentKind.MARK, "1,2") in segments
    assert join_segments(segments) == text


def test_no_break_without_trailing_newline() -> None:
    segments = build_segments("a,b,c\n1,2", [ErrorRange(6, 9)])
    assert all(segment.kind is not SegmentKind.BREAK for segment in segments)
