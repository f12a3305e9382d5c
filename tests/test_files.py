from __future__ import annotations

import json

from adapters.files import (
    READ_ERROR_MESSAGE,
    UNSUPPORTED_FILE_MESSAGE,
    export_history,
    export_raw,
    load_input_file,
)
from core.models import AnalysisMode, AnalysisRecord
from core.validation import validate


def test_load_allowed_file(tmp_path) -> None:
    path = tmp_path / "Readings.CSV"
    path.write_text("a,b\n1,2\n", encoding="utf-8")
    loaded = load_input_file(path)
    assert loaded.error is None
    assert loaded.content == "a,b\n1,2\n"
    assert loaded.file_name == "Readings.CSV"


def test_load_strips_utf8_bom(tmp_path) -> None:
    path = tmp_path / "payload.json"
    path.write_bytes(b"\xef\xbb\xbf{\"a\": 1}")
    loaded = load_input_file(path)
    assert loaded.content == "{\"a\": 1}"
    assert validate(loaded.content, AnalysisMode.QUANTUM).ok


def test_load_rejects_unsupported_extension(tmp_path) -> None:
    path = tmp_path / "image.png"
    path.write_bytes(b"\x89PNG")
    loaded = load_input_file(path)
    assert loaded.error == UNSUPPORTED_FILE_MESSAGE
    assert loaded.content is None


def test_load_rejects_missing_extension(tmp_path) -> None:
    path = tmp_path / "Makefile"
    path.write_text("all:", encoding="utf-8")
    assert load_input_file(path).error == UNSUPPORTED_FILE_MESSAGE


def test_load_reports_read_errors(tmp_path) -> None:
    assert load_input_file(tmp_path / "missing.json").error == READ_ERROR_MESSAGE
    binary = tmp_path / "broken.txt"
    binary.write_bytes(b"\xff\xfe\xfa")
    assert load_input_file(binary).error == READ_ERROR_MESSAGE


def test_export_raw_names_file_after_mode(tmp_path) -> None:
    path = export_raw("x|y\n1|2", AnalysisMode.WEATHER, tmp_path / "exports")
    assert path is not None
    assert path.name.startswith("analysis_raw_weather_")
    assert path.suffix == ".txt"
    assert path.read_text(encoding="utf-8") == "x|y\n1|2"


def test_export_raw_skips_empty_input(tmp_path) -> None:
    assert export_raw("", AnalysisMode.CODE, tmp_path) is None


def test_export_history_writes_json(tmp_path) -> None:
    record = AnalysisRecord(
        id=1,
        timestamp="2024-01-01T00:00:00+00:00",
        file_name="a.csv",
        input_snippet="a,b",
        mode=AnalysisMode.QUANTUM,
        results={"summary": "s"},
    )
    path = export_history([record], tmp_path)
    assert path is not None
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == [record.to_dict()]
    assert export_history([], tmp_path) is None
