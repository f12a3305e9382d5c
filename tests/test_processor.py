from __future__ import annotations

import asyncio
from typing import Any, Optional

from core.history import HistoryStore
from core.models import AnalysisMode
from core.processor import ANALYSIS_FAILED_MESSAGE, AnalysisProcessor, make_snippet


class FakeStorage:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get_value(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.values[key] = value


class FakeAnalyzer:
    def __init__(self, result: Optional[dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.calls: list[tuple[str, AnalysisMode]] = []
        self._result = result or {"summary": "ok", "insights": [], "recommendations": []}
        self._error = error

    async def analyze(self, text: str, mode: AnalysisMode) -> dict[str, Any]:
        self.calls.append((text, mode))
        if self._error:
            raise self._error
        return self._result


def _processor(analyzer: FakeAnalyzer) -> tuple[AnalysisProcessor, HistoryStore]:
    history = HistoryStore(FakeStorage())
    return AnalysisProcessor(analyzer, history, snippet_chars=100), history


def test_invalid_input_never_reaches_analyzer() -> None:
    analyzer = FakeAnalyzer()
    processor, history = _processor(analyzer)

    submission = asyncio.run(processor.submit("a,b,c\n1,2", AnalysisMode.QUANTUM))

    assert not submission.ok
    assert submission.outcome.message is not None
    assert len(submission.outcome.ranges) == 1
    assert analyzer.calls == []
    assert history.load() == []


def test_successful_submission_is_recorded() -> None:
    analyzer = FakeAnalyzer({"summary": "stable", "insights": [], "recommendations": ["watch"]})
    processor, history = _processor(analyzer)

    submission = asyncio.run(processor.submit('[{"v": 1}]', "weather", file_name="w.json"))

    assert submission.ok
    assert submission.results == {"summary": "stable", "insights": [], "recommendations": ["watch"]}
    assert analyzer.calls == [('[{"v": 1}]', AnalysisMode.WEATHER)]
    records = history.load()
    assert len(records) == 1
    assert records[0].file_name == "w.json"
    assert records[0].mode is AnalysisMode.WEATHER
    assert records[0].id == submission.record.id


def test_analyzer_failure_is_generic_and_not_recorded() -> None:
    analyzer = FakeAnalyzer(error=RuntimeError("quota exceeded"))
    processor, history = _processor(analyzer)

    submission = asyncio.run(processor.submit("print('hi')", AnalysisMode.CODE))

    assert not submission.ok
    assert submission.outcome.ok
    assert submission.error == ANALYSIS_FAILED_MESSAGE
    assert len(analyzer.calls) == 1
    assert history.load() == []


def test_rapid_submissions_get_distinct_ids() -> None:
    processor, history = _processor(FakeAnalyzer())

    async def _run() -> None:
        for _ in range(5):
            await processor.submit("free text", AnalysisMode.INTERNET)

    asyncio.run(_run())
    ids = [record.id for record in history.load()]
    assert len(set(ids)) == 5
    assert ids == sorted(ids, reverse=True)


def test_snippet_is_clipped_with_ellipsis() -> None:
    assert make_snippet("x" * 100, 100) == "x" * 100
    assert make_snippet("x" * 101, 100) == "x" * 100 + "..."
