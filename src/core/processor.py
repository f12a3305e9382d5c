"""Core submission pipeline.

The pipeline enforces a strict order:
1) Validate synchronously, abort on failure
2) One awaited analyzer call, no retry, timeout or cancellation
3) Record the result in history

This module is integration-agnostic. It only relies on ports, so the TUI and
the CLI share it unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from core.history import HistoryStore
from core.models import AnalysisMode, AnalysisRecord, ValidationOutcome
from core.ports import AnalyzerPort
from core.validation import validate

LOGGER = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "An error occurred during analysis. Please try again."


@dataclass(frozen=True)
class Submission:
    """Outcome of one submit call."""

    outcome: ValidationOutcome
    record: Optional[AnalysisRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def results(self) -> Optional[dict[str, Any]]:
        return self.record.results if self.record else None


def make_snippet(text: str, limit: int) -> str:
    """Clip the input for history previews."""

    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class AnalysisProcessor:
    """Orchestrates validation, analysis and history persistence."""

    def __init__(
        self,
        analyzer: AnalyzerPort,
        history: HistoryStore,
        snippet_chars: int = 100,
    ) -> None:
        self._analyzer = analyzer
        self._history = history
        self._snippet_chars = snippet_chars

    async def submit(
        self,
        text: str,
        mode: "AnalysisMode | str",
        file_name: Optional[str] = None,
    ) -> Submission:
        """Validate and analyze one input."""

        mode = AnalysisMode.parse(mode)
        outcome = validate(text, mode)
        if not outcome.ok:
            LOGGER.info("Submission blocked (%s): %s", mode.value, outcome.message)
            return Submission(outcome=outcome)

        try:
            results = await self._analyzer.analyze(text, mode)
        except Exception:
            LOGGER.exception("Analysis failed for mode %s", mode.value)
            return Submission(outcome=outcome, error=ANALYSIS_FAILED_MESSAGE)

        record = AnalysisRecord(
            id=self._history.next_id(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            file_name=file_name,
            input_snippet=make_snippet(text, self._snippet_chars),
            mode=mode,
            results=results,
        )
        self._history.append(record)
        LOGGER.info("Analysis saved (%s, id=%s)", mode.value, record.id)
        return Submission(outcome=outcome, record=record)
