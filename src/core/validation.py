"""Input validation and error localization (core domain).

Validation decides whether pasted or loaded text is structured enough to send
for analysis. Failures are returned as data: a message plus the character
ranges to highlight. Nothing in here raises for any string input.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Optional, Sequence

from core.models import AnalysisMode, ErrorRange, LineInfo, ValidationOutcome

EMPTY_INPUT_MESSAGE = "Input is empty."
JSON_SCALAR_MESSAGE = "Valid JSON detected, but it must be an Object or Array."
JSON_SYNTAX_PREFIX = "JSON Syntax Error: "
TOO_FEW_ROWS_MESSAGE = "Format Error: Provide at least a header and data row for CSV, or valid JSON."
NO_DELIMITER_MESSAGE = "CSV Error: Unable to detect a valid delimiter."

# Order matters: ties go to the earliest candidate.
DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")
MAX_LISTED_ROWS = 5

_POSITION_PATTERNS = (
    re.compile(r"at position (\d+)"),
    re.compile(r"\(char (\d+)\)"),
)

# Bare NaN/Infinity outside string literals; strings are matched to skip them.
_BARE_CONSTANT = re.compile(r'"(?:[^"\\]|\\.)*"|(-?Infinity|NaN)')

PositionExtractor = Callable[[Exception], Optional[int]]


def extract_error_position(error: Exception) -> Optional[int]:
    """Return the character offset a JSON parser error points at, if known.

    ``json.JSONDecodeError`` carries the offset in ``pos``. Other parsers only
    embed it in the message text, so we fall back to scraping
    ``at position <n>`` or ``(char <n>)``.
    """

    pos = getattr(error, "pos", None)
    if isinstance(pos, int) and not isinstance(pos, bool):
        return pos
    message = str(error)
    for pattern in _POSITION_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1))
    return None


def build_line_infos(text: str) -> tuple[LineInfo, ...]:
    """Split on ``\\n`` and record each line's absolute start offset."""

    infos: list[LineInfo] = []
    offset = 0
    for line in text.split("\n"):
        infos.append(LineInfo(text=line, start=offset, length=len(line)))
        offset += len(line) + 1
    return tuple(infos)


def detect_delimiter(header: str, candidates: Sequence[str] = DELIMITERS) -> tuple[str, int]:
    """Pick the delimiter yielding the most columns on the header line.

    Returns ``(delimiter, column_count)``. The first candidate is returned
    with its own count when nothing beats it.
    """

    best_delimiter = candidates[0]
    max_cols = 0
    for delimiter in candidates:
        cols = len(header.split(delimiter))
        if cols > max_cols:
            max_cols = cols
            best_delimiter = delimiter
    return best_delimiter, max_cols


def validate(
    text: str,
    mode: "AnalysisMode | str",
    position_extractor: PositionExtractor = extract_error_position,
) -> ValidationOutcome:
    """Validate ``text`` for ``mode`` and localize any structural defect."""

    trimmed = text.strip()
    if not trimmed:
        return ValidationOutcome(EMPTY_INPUT_MESSAGE)

    if not AnalysisMode.parse(mode).is_structured:
        return ValidationOutcome()

    if trimmed.startswith(("{", "[")):
        return _validate_json(text, position_extractor)
    return _validate_table(text)


def _validate_json(text: str, position_extractor: PositionExtractor) -> ValidationOutcome:
    try:
        parsed = json.loads(text, parse_constant=_constant_rejecter(text))
    except (ValueError, RecursionError) as exc:
        ranges: tuple[ErrorRange, ...] = ()
        pos = position_extractor(exc)
        if pos is not None:
            ranges = (ErrorRange(pos, pos + 1),)
        return ValidationOutcome(f"{JSON_SYNTAX_PREFIX}{exc}", ranges)

    if not _is_composite(parsed):
        return ValidationOutcome(JSON_SCALAR_MESSAGE)
    return ValidationOutcome()


def _constant_rejecter(text: str) -> Callable[[str], Any]:
    """Build a ``parse_constant`` hook that refuses NaN and Infinity.

    The parser stops at the first constant it meets, so the first bare
    constant outside a string literal is the offending token.
    """

    def reject(name: str) -> Any:
        for match in _BARE_CONSTANT.finditer(text):
            if match.group(1):
                raise json.JSONDecodeError(f"Unexpected token {name}", text, match.start(1))
        raise ValueError(f"Unexpected token {name}")

    return reject


def _is_composite(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _validate_table(text: str) -> ValidationOutcome:
    data_lines = [info for info in build_line_infos(text) if info.text.strip()]
    if len(data_lines) < 2:
        return ValidationOutcome(TOO_FEW_ROWS_MESSAGE)

    delimiter, max_cols = detect_delimiter(data_lines[0].text)
    if max_cols < 2:
        return ValidationOutcome(NO_DELIMITER_MESSAGE)

    # Row numbers count data lines only; the header is row 1.
    mismatches = [
        (row_number, info)
        for row_number, info in enumerate(data_lines[1:], start=2)
        if len(info.text.split(delimiter)) != max_cols
    ]
    if not mismatches:
        return ValidationOutcome()

    rows = [row_number for row_number, _ in mismatches]
    preview = ", ".join(str(row) for row in rows[:MAX_LISTED_ROWS])
    suffix = f"...and {len(rows) - MAX_LISTED_ROWS} more" if len(rows) > MAX_LISTED_ROWS else ""
    message = f"CSV Structure Error: Rows {preview}{suffix} do not match header column count ({max_cols})."
    ranges = tuple(ErrorRange(info.start, info.end) for _, info in mismatches)
    return ValidationOutcome(message, ranges)
