"""State container for the analyze view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.models import AnalysisMode, ErrorRange


@dataclass
class AnalysisState:
    text: str = ""
    file_name: str | None = None
    mode: AnalysisMode = AnalysisMode.QUANTUM
    message: str | None = None
    ranges: tuple[ErrorRange, ...] = field(default_factory=tuple)
    results: dict[str, Any] | None = None
    loading: bool = False

    def clear_validation(self) -> None:
        self.message = None
        self.ranges = ()
