"""File ingestion and export helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from core.models import AnalysisMode, AnalysisRecord

LOGGER = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({"json", "csv", "txt", "js", "ts", "py", "html", "css"})
UNSUPPORTED_FILE_MESSAGE = "Unsupported file type."
READ_ERROR_MESSAGE = "Error reading file."


@dataclass(frozen=True)
class LoadedFile:
    content: Optional[str]
    file_name: Optional[str]
    error: Optional[str] = None


def load_input_file(path: "str | Path") -> LoadedFile:
    """Read a text file for analysis, enforcing the extension allow-list."""

    path = Path(path)
    extension = path.name.rsplit(".", 1)[-1].lower() if "." in path.name else ""
    if extension not in ALLOWED_EXTENSIONS:
        return LoadedFile(None, None, UNSUPPORTED_FILE_MESSAGE)
    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        LOGGER.exception("Failed to read %s", path)
        return LoadedFile(None, None, READ_ERROR_MESSAGE)
    return LoadedFile(content, path.name)


def export_raw(text: str, mode: AnalysisMode, directory: "str | Path") -> Optional[Path]:
    """Write the raw input to ``analysis_raw_<mode>_<ms>.txt``."""

    if not text:
        return None
    exports_dir = Path(directory)
    exports_dir.mkdir(parents=True, exist_ok=True)
    stamp = int(datetime.now().timestamp() * 1000)
    path = exports_dir / f"analysis_raw_{mode.value}_{stamp}.txt"
    path.write_text(text, encoding="utf-8")
    return path


def export_history(records: Iterable[AnalysisRecord], directory: "str | Path") -> Optional[Path]:
    """Dump history records to a timestamped JSON file."""

    rows = [record.to_dict() for record in records]
    if not rows:
        return None
    exports_dir = Path(directory)
    exports_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    path = exports_dir / f"history-{timestamp}.json"
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=True), encoding="utf-8")
    return path
