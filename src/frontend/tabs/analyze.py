"""Analyze tab: input, validation highlights and results."""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Optional

from rich.text import Text
from textual import on, work
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, DataTable, Select, Static, TextArea

from adapters.files import export_raw, load_input_file
from core.highlight import build_segments
from core.models import AnalysisMode, AnalysisRecord
from core.validation import validate
from ..constants import MODE_LABELS, PLACEHOLDERS
from ..modals import LoadFileScreen
from ..render import insight_rows, render_recommendations, render_segments, render_summary
from ..state import AnalysisState


class AnalyzeTab(Container):
    """Analyze tab with input editor, highlight preview and results."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.state = AnalysisState()
        # Text we set ourselves; its Changed event must not clear state.
        self._programmatic_text: Optional[str] = None
        self._insights: list[dict[str, Any]] = []

    def compose(self):
        with Horizontal(id="analyze-body"):
            with Vertical(id="analyze-left"):
                with Horizontal(id="analyze-toolbar"):
                    yield Select(
                        [(MODE_LABELS[mode], mode.value) for mode in AnalysisMode],
                        value=self.state.mode.value,
                        id="mode-select",
                        allow_blank=False,
                    )
                    yield Static("", id="file-badge")
                yield TextArea(id="data-input", placeholder=PLACEHOLDERS[self.state.mode])
                yield Static("", id="validation-message")
                with VerticalScroll(id="highlight-scroll"):
                    yield Static("", id="highlight-preview")
                with Horizontal(id="analyze-actions"):
                    yield Button("Analyze", id="analyze-btn", variant="primary")
                    yield Button("Load file", id="load-file-btn")
                    yield Button("Export raw", id="export-raw-btn")
                yield Static("", id="analyze-output")
            with VerticalScroll(id="analyze-right"):
                yield Static("Run an analysis to see insights.", id="results-summary")
                yield DataTable(id="insights-table", cursor_type="row")
                yield Static("", id="insight-description")
                yield Static("", id="results-recommendations")

    def on_mount(self) -> None:
        table = self.query_one("#insights-table", DataTable)
        table.add_column("type", key="type", width=14)
        table.add_column("title", key="title", width=32)
        table.add_column("confidence", key="confidence", width=10)
        table.zebra_stripes = True
        self.query_one("#analyze-actions").styles.height = 3
        self._refresh_highlights()
        self._update_action_state()

    @on(Select.Changed, "#mode-select")
    def _on_mode_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        self.state.mode = AnalysisMode.parse(str(event.value))
        self.query_one("#data-input", TextArea).placeholder = PLACEHOLDERS[self.state.mode]

    @on(TextArea.Changed, "#data-input")
    def _on_input_changed(self, event: TextArea.Changed) -> None:
        value = event.text_area.text
        if self._programmatic_text is not None and value == self._programmatic_text:
            self._programmatic_text = None
            return
        self.state.text = value
        self.state.file_name = None
        if self.state.message:
            self.state.clear_validation()
            self._refresh_validation()
        self._refresh_file_badge()
        self._refresh_highlights()
        self._update_action_state()

    @on(DataTable.RowHighlighted, "#insights-table")
    def _on_insight_highlighted(self, event: DataTable.RowHighlighted) -> None:
        index = event.cursor_row
        if 0 <= index < len(self._insights):
            description = str(self._insights[index].get("description", ""))
            self.query_one("#insight-description", Static).update(Text(description))

    @on(Button.Pressed, "#analyze-btn")
    def _on_analyze_pressed(self) -> None:
        self.action_analyze()

    @on(Button.Pressed, "#load-file-btn")
    def _on_load_pressed(self) -> None:
        self.action_load_file()

    @on(Button.Pressed, "#export-raw-btn")
    def _on_export_pressed(self) -> None:
        self.action_export_raw()

    def action_analyze(self) -> None:
        if self.state.loading or not self.state.text.strip():
            return
        outcome = validate(self.state.text, self.state.mode)
        if not outcome.ok:
            self.state.message = outcome.message
            self.state.ranges = outcome.ranges
            self._refresh_validation()
            self._refresh_highlights()
            return
        self.state.clear_validation()
        self._refresh_validation()
        self._refresh_highlights()
        self.state.loading = True
        self._update_action_state()
        self._set_output(f"analyzing as {self.state.mode.value}...")
        self._run_analysis(self.state.text, self.state.mode, self.state.file_name)

    @work(exclusive=True)
    async def _run_analysis(self, text: str, mode: AnalysisMode, file_name: Optional[str]) -> None:
        try:
            submission = await self.app.processor.submit(text, mode, file_name)
        except sqlite3.Error as exc:
            self._set_output(f"history error: {exc}")
            return
        finally:
            self.state.loading = False
            self._update_action_state()
        if not submission.outcome.ok:
            self.state.message = submission.outcome.message
            self.state.ranges = submission.outcome.ranges
            self._refresh_validation()
            self._refresh_highlights()
            self._set_output("")
            return
        if submission.error:
            self.state.message = submission.error
            self._refresh_validation()
            self._set_output("")
            return
        self.show_results(submission.results or {})
        self._set_output(f"analysis saved to history (id {submission.record.id})")
        self.app.refresh_history()

    def action_load_file(self) -> None:
        self.app.push_screen(LoadFileScreen(), self._handle_load_file)

    def _handle_load_file(self, path: str | None) -> None:
        if not path:
            return
        loaded = load_input_file(path)
        if loaded.error or loaded.content is None:
            self.state.message = loaded.error
            self._refresh_validation()
            return
        self._set_input_text(loaded.content)
        self.state.file_name = loaded.file_name
        outcome = validate(loaded.content, self.state.mode)
        self.state.message = outcome.message
        self.state.ranges = outcome.ranges
        self._refresh_file_badge()
        self._refresh_validation()
        self._refresh_highlights()
        self._update_action_state()
        self._set_output(f"loaded {loaded.file_name}")

    def action_export_raw(self) -> None:
        if not self.state.text:
            self._set_output("Nothing to export.")
            return
        try:
            path = export_raw(self.state.text, self.state.mode, self.app.export_dir)
        except OSError as exc:
            self._set_output(f"export failed: {exc.strerror or exc}")
            return
        self._set_output(f"exported raw input to {path}")

    def load_record(self, record: AnalysisRecord) -> None:
        """Restore a history record into the editor."""

        self._set_input_text(json.dumps(record.results, indent=2))
        self.state.file_name = record.file_name
        self.state.mode = record.mode
        self.state.clear_validation()
        self.query_one("#mode-select", Select).value = record.mode.value
        self.show_results(record.results)
        self._refresh_file_badge()
        self._refresh_validation()
        self._refresh_highlights()
        self._update_action_state()

    def show_results(self, results: dict[str, Any]) -> None:
        self.state.results = results
        self._insights = [item for item in results.get("insights") or [] if isinstance(item, dict)]
        self.query_one("#results-summary", Static).update(render_summary(results))
        table = self.query_one("#insights-table", DataTable)
        table.clear()
        for index, row in enumerate(insight_rows(results)):
            table.add_row(*row, key=str(index))
        self.query_one("#insight-description", Static).update("")
        self.query_one("#results-recommendations", Static).update(render_recommendations(results))

    def _set_input_text(self, text: str) -> None:
        text_area = self.query_one("#data-input", TextArea)
        self.state.text = text
        if text_area.text != text:
            self._programmatic_text = text
            text_area.text = text

    def _refresh_validation(self) -> None:
        banner = self.query_one("#validation-message", Static)
        banner.update(Text(self.state.message or ""))
        banner.set_class(bool(self.state.message), "visible")

    def _refresh_highlights(self) -> None:
        preview = self.query_one("#highlight-preview", Static)
        if not self.state.ranges:
            preview.update("")
            self.query_one("#highlight-scroll").display = False
            return
        segments = build_segments(self.state.text, self.state.ranges)
        preview.update(render_segments(segments))
        self.query_one("#highlight-scroll").display = True

    def _refresh_file_badge(self) -> None:
        badge = self.query_one("#file-badge", Static)
        badge.update(Text(self.state.file_name.upper() if self.state.file_name else ""))

    def _update_action_state(self) -> None:
        analyze_btn = self.query_one("#analyze-btn", Button)
        analyze_btn.disabled = self.state.loading or not self.state.text.strip()
        analyze_btn.label = "Analyzing..." if self.state.loading else "Analyze"

    def _set_output(self, message: str) -> None:
        self.query_one("#analyze-output", Static).update(Text(message))
