from __future__ import annotations

import json
from typing import Optional

from adapters.sqlite_storage import SQLiteStorage
from core.history import HistoryStore
from core.models import AnalysisMode, AnalysisRecord


class FakeStorage:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.writes = 0

    def get_value(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.writes += 1
        self.values[key] = value


def _record(record_id: int, mode: AnalysisMode = AnalysisMode.QUANTUM) -> AnalysisRecord:
    return AnalysisRecord(
        id=record_id,
        timestamp="2024-01-01T00:00:00+00:00",
        file_name=None,
        input_snippet="a,b\n1,2",
        mode=mode,
        results={"summary": f"run {record_id}", "insights": [], "recommendations": []},
    )


def test_append_is_newest_first_and_persists_immediately() -> None:
    storage = FakeStorage()
    history = HistoryStore(storage)
    history.append(_record(1))
    history.append(_record(2))

    assert [record.id for record in history.load()] == [2, 1]
    assert storage.writes == 2
    stored = json.loads(storage.values["quantum_analysis_history"])
    assert [item["id"] for item in stored] == [2, 1]


def test_history_never_exceeds_limit() -> None:
    storage = FakeStorage()
    history = HistoryStore(storage)
    for record_id in range(1, 76):
        history.append(_record(record_id))

    records = history.load()
    assert len(records) == 50
    assert records[0].id == 75
    assert records[-1].id == 26
    assert len(json.loads(storage.values["quantum_analysis_history"])) == 50


def test_remove_unknown_id_is_noop() -> None:
    storage = FakeStorage()
    history = HistoryStore(storage)
    history.append(_record(1))
    writes = storage.writes

    assert history.remove(999) is False
    assert [record.id for record in history.load()] == [1]
    assert storage.writes == writes


def test_remove_existing_id() -> None:
    history = HistoryStore(FakeStorage())
    history.append(_record(1))
    history.append(_record(2))

    assert history.remove(1) is True
    assert [record.id for record in history.load()] == [2]
    assert history.get(1) is None


def test_next_id_is_strictly_increasing_for_same_clock_value() -> None:
    history = HistoryStore(FakeStorage(), clock=lambda: 1000)
    first = history.next_id()
    second = history.next_id()
    assert first == 1000
    assert second == 1001


def test_next_id_skips_past_persisted_records() -> None:
    storage = FakeStorage()
    HistoryStore(storage).append(_record(5000))
    reloaded = HistoryStore(storage, clock=lambda: 10)
    assert reloaded.next_id() == 5001


def test_corrupt_payload_is_treated_as_empty() -> None:
    storage = FakeStorage()
    storage.values["quantum_analysis_history"] = "{not json"
    history = HistoryStore(storage)
    assert history.load() == []
    history.append(_record(1))
    assert [record.id for record in history.load()] == [1]


def test_clear_empties_history() -> None:
    storage = FakeStorage()
    history = HistoryStore(storage)
    history.append(_record(1))
    history.clear()
    assert history.load() == []
    assert json.loads(storage.values["quantum_analysis_history"]) == []


def test_sqlite_roundtrip(tmp_path) -> None:
    storage = SQLiteStorage(str(tmp_path / "nested" / "history.db"))
    storage.init_db()
    history = HistoryStore(storage, storage_key="custom_key", limit=3)
    for record_id in range(1, 5):
        history.append(_record(record_id, AnalysisMode.WEATHER))

    reopened = HistoryStore(SQLiteStorage(str(tmp_path / "nested" / "history.db")), storage_key="custom_key")
    records = reopened.load()
    assert [record.id for record in records] == [4, 3, 2]
    assert records[0].mode is AnalysisMode.WEATHER
    assert records[0].results["summary"] == "run 4"
    assert storage.get_value("quantum_analysis_history") is None


def test_sqlite_set_value_overwrites(tmp_path) -> None:
    storage = SQLiteStorage(str(tmp_path / "kv.db"))
    storage.init_db()
    storage.set_value("k", "one")
    storage.set_value("k", "two")
    assert storage.get_value("k") == "two"
