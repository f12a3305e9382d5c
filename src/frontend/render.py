"""Rich renderables for highlights and analysis results."""

from __future__ import annotations

from typing import Any, Iterable

from rich.text import Text

from core.highlight import MARK_PLACEHOLDER, Segment, SegmentKind
from .constants import BRAND_VIOLET, MARK_STYLE


def render_segments(segments: Iterable[Segment]) -> Text:
    """Turn highlight segments into a styled Text for the preview pane."""

    rendered = Text()
    for segment in segments:
        if segment.kind is SegmentKind.MARK:
            rendered.append(segment.display, style=MARK_STYLE)
        elif segment.kind is SegmentKind.BREAK:
            # Materialize the empty last line after a trailing newline.
            rendered.append(MARK_PLACEHOLDER)
        else:
            rendered.append(segment.text)
    return rendered


def format_confidence(value: Any) -> str:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "-"
    return f"{round(number * 100)}%"


def render_summary(results: dict[str, Any]) -> Text:
    summary = str(results.get("summary") or "No summary returned.")
    return Text.assemble(("Summary\n", f"bold {BRAND_VIOLET}"), summary)


def render_recommendations(results: dict[str, Any]) -> Text:
    recommendations = [str(item) for item in results.get("recommendations") or []]
    if not recommendations:
        return Text("No recommendations.", style="dim")
    rendered = Text("Recommendations\n", style=f"bold {BRAND_VIOLET}")
    rendered.append("\n".join(f"{index}. {item}" for index, item in enumerate(recommendations, start=1)))
    return rendered


def insight_rows(results: dict[str, Any]) -> list[tuple[str, str, str]]:
    """Rows for the insights table: (type, title, confidence)."""

    rows = []
    for insight in results.get("insights") or []:
        if not isinstance(insight, dict):
            continue
        rows.append(
            (
                str(insight.get("type", "")),
                str(insight.get("title", "")),
                format_confidence(insight.get("confidence")),
            )
        )
    return rows
