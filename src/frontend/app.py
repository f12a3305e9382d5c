"""Main Textual app for the insightscope analysis panel."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import ContentSwitcher, Footer, Static, Tab, Tabs

from core.history import HistoryStore
from core.models import AnalysisRecord
from core.processor import AnalysisProcessor
from .constants import BRAND_VIOLET
from .tabs.analyze import AnalyzeTab
from .tabs.history import HistoryTab


class InsightScopeApp(App):
    """Analysis panel with an Analyze tab and a History tab."""

    def __init__(
        self,
        processor: AnalysisProcessor,
        history: HistoryStore,
        export_dir: "str | Path",
        model_name: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.processor = processor
        self.history = history
        self.export_dir = Path(export_dir)
        self._model_name = model_name

    BINDINGS = [
        ("f5", "analyze", "Analyze"),
        ("f3", "load_file", "Load file"),
        ("f4", "export_raw", "Export raw"),
        ("f2", "show_history", "History"),
        ("ctrl+q", "quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("validation engine v1.0.0", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(Text(f"model: {self._model_name or 'unset'}"), classes="subtle")
                    yield Static(Text(f"history: last {self.history.limit}"), classes="subtle")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Analyze", id="analyze"),
                    Tab("History", id="history"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield AnalyzeTab(id="analyze")
            yield HistoryTab(id="history")
        yield Footer()

    def on_mount(self) -> None:
        self._set_active_tab("analyze")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def _activate(self, tab_id: str) -> None:
        self.query_one("#tabs", Tabs).active = tab_id
        self._set_active_tab(tab_id)

    def action_analyze(self) -> None:
        self._activate("analyze")
        self.query_one(AnalyzeTab).action_analyze()

    def action_load_file(self) -> None:
        self._activate("analyze")
        self.query_one(AnalyzeTab).action_load_file()

    def action_export_raw(self) -> None:
        self.query_one(AnalyzeTab).action_export_raw()

    def action_show_history(self) -> None:
        self.refresh_history()
        self._activate("history")

    def refresh_history(self) -> None:
        self.query_one(HistoryTab).reload_records()

    def open_record(self, record: AnalysisRecord) -> None:
        """Restore a history record and switch to the Analyze tab."""

        self.query_one(AnalyzeTab).load_record(record)
        self._activate("analyze")

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("INSIGHT", BRAND_VIOLET),
            ("SCOPE > Analysis Panel", "bold"),
        )
