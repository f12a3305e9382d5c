"""Modal dialogs for the Textual analysis panel."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class LoadFileScreen(ModalScreen[str | None]):
    """Ask for a path to load into the input."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Load file", classes="modal-title"),
            Static("", id="load-error", classes="modal-error"),
            Static("path (.json .csv .txt .js .ts .py .html .css)", classes="form-label"),
            Input(placeholder="data/readings.csv", id="load-path"),
            Horizontal(
                Button("Load", id="load-confirm", variant="success"),
                Button("Cancel", id="load-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "load-cancel":
            self.dismiss(None)
            return
        if event.button.id != "load-confirm":
            return
        self._submit(self.query_one("#load-path", Input).value)

    def _submit(self, raw_path: str) -> None:
        path = raw_path.strip()
        if not path:
            self.query_one("#load-error", Static).update("path is required")
            return
        self.dismiss(path)


class DeleteRecordScreen(ModalScreen[bool]):
    """Confirm deletion of a history record."""

    def __init__(self, label: str) -> None:
        super().__init__()
        self._label = label

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete analysis?", classes="modal-title"),
            Static(self._label, classes="modal-body"),
            Horizontal(
                Button("Delete", id="delete-confirm", variant="error"),
                Button("Cancel", id="delete-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "delete-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)
