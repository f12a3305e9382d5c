"""History tab for browsing, restoring and exporting past analyses."""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from rich.text import Text
from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Static

from adapters.files import export_history
from core.models import AnalysisRecord
from ..modals import DeleteRecordScreen


class HistoryTab(Container):
    """History tab listing the most recent analyses, newest first."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._records: list[AnalysisRecord] = []
        self._current_id: Optional[int] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="history-panel"):
            yield Static("History", id="history-title")
            yield DataTable(id="history-table", cursor_type="row")
            with Horizontal(id="history-actions"):
                yield Button("Load", id="history-load", variant="primary")
                yield Button("Delete", id="history-delete", variant="error")
                yield Button("Export JSON", id="history-export", variant="success")
            yield Static("", id="history-output")

    def on_mount(self) -> None:
        table = self.query_one("#history-table", DataTable)
        table.add_column("date", key="timestamp", width=20)
        table.add_column("mode", key="mode", width=10)
        table.add_column("file", key="file_name", width=20)
        table.add_column("input", key="input_snippet", width=48)
        table.zebra_stripes = True
        table.styles.height = "1fr"
        self.query_one("#history-actions").styles.height = 3
        self._table_ready = True
        self.reload_records()

    def reload_records(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#history-table", DataTable)
        table.clear()
        try:
            self._records = self.app.history.load()
        except sqlite3.Error as exc:
            self._records = []
            self._set_output(f"db error: {exc}")
            return
        for record in self._records:
            table.add_row(
                self._format_date_display(record.timestamp),
                record.mode.value,
                record.file_name or "",
                self._clip_text(record.input_snippet.replace("\n", " ")),
                key=str(record.id),
            )
        if self._current_id is not None and self.app.history.get(self._current_id) is None:
            self._current_id = None
        self._update_action_state()
        if not self._records:
            self._set_output("No analysis history found.")
        else:
            self._set_output(f"{len(self._records)} of {self.app.history.limit} records")

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._current_id = self._coerce_row_key(event.row_key)
        self._update_action_state()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_id = self._coerce_row_key(event.row_key)
        self._load_current()

    @on(Button.Pressed, "#history-load")
    def _on_load(self) -> None:
        self._load_current()

    @on(Button.Pressed, "#history-delete")
    def _on_delete(self) -> None:
        record = self._current_record()
        if record is None:
            return
        label = f"{self._format_date_display(record.timestamp)} {record.mode.value}"
        self.app.push_screen(DeleteRecordScreen(label), self._handle_delete)

    @on(Button.Pressed, "#history-export")
    def _on_export(self) -> None:
        try:
            path = export_history(self._records, self.app.export_dir)
        except OSError as exc:
            self._set_output(f"export failed: {exc.strerror or exc}")
            return
        if path is None:
            self._set_output("No records to export.")
            return
        self._set_output(f"exported {len(self._records)} records to {path}")

    def _handle_delete(self, confirmed: bool | None) -> None:
        if not confirmed or self._current_id is None:
            return
        try:
            self.app.history.remove(self._current_id)
        except sqlite3.Error as exc:
            self._set_output(f"delete failed: {exc}")
            return
        self._current_id = None
        self.reload_records()

    def _load_current(self) -> None:
        record = self._current_record()
        if record is None:
            return
        self.app.open_record(record)

    def _current_record(self) -> Optional[AnalysisRecord]:
        if self._current_id is None:
            return None
        return self.app.history.get(self._current_id)

    def _update_action_state(self) -> None:
        has_selection = self._current_id is not None
        self.query_one("#history-load", Button).disabled = not has_selection
        self.query_one("#history-delete", Button).disabled = not has_selection
        self.query_one("#history-export", Button).disabled = not self._records

    def _set_output(self, message: str) -> None:
        self.query_one("#history-output", Static).update(Text(message))

    @staticmethod
    def _coerce_row_key(value: Any) -> Optional[int]:
        raw = value.value if hasattr(value, "value") else value
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _clip_text(value: str, limit: int = 64) -> str:
        if len(value) <= limit:
            return value
        return value[: limit - 3] + "..."

    @staticmethod
    def _format_date_display(value: str) -> str:
        if not value:
            return ""
        display = value.replace("T", " ")
        return display[:19]
