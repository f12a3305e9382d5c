"""Core domain models.

These dataclasses are shared across the core, adapters and frontend so none of
them depend on Textual, LiteLLM or SQLite types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AnalysisMode(str, Enum):
    """Declared analysis category for a submission."""

    QUANTUM = "quantum"
    CODE = "code"
    WEATHER = "weather"
    INTERNET = "internet"

    @property
    def is_structured(self) -> bool:
        """Whether strict structural validation applies to this mode."""

        return self not in (AnalysisMode.CODE, AnalysisMode.INTERNET)

    @classmethod
    def parse(cls, value: "str | AnalysisMode") -> "AnalysisMode":
        if isinstance(value, AnalysisMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Unknown analysis mode: {value!r} (expected one of {choices})") from None


@dataclass(frozen=True)
class ErrorRange:
    """Half-open [start, end) interval over the original input."""

    start: int
    end: int


@dataclass(frozen=True)
class LineInfo:
    """One input line with its absolute offset; length excludes the newline."""

    text: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one input against one mode."""

    message: Optional[str] = None
    ranges: tuple[ErrorRange, ...] = ()

    def __post_init__(self) -> None:
        if self.ranges and self.message is None:
            raise ValueError("error ranges require a message")

    @property
    def ok(self) -> bool:
        return self.message is None


@dataclass(frozen=True)
class AnalysisRecord:
    """Persisted history entry for one successful analysis."""

    id: int
    timestamp: str
    file_name: Optional[str]
    input_snippet: str
    mode: AnalysisMode
    results: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "file_name": self.file_name,
            "input_snippet": self.input_snippet,
            "mode": self.mode.value,
            "results": self.results,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AnalysisRecord":
        results = payload.get("results") or {}
        return cls(
            id=int(payload["id"]),
            timestamp=str(payload.get("timestamp", "")),
            file_name=payload.get("file_name"),
            input_snippet=str(payload.get("input_snippet", "")),
            mode=AnalysisMode.parse(payload.get("mode", AnalysisMode.QUANTUM)),
            results=results if isinstance(results, dict) else {},
        )
