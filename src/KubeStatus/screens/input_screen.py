from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static


@dataclass
class InputInfo:
    """A simple dataclass to hold input field information."""

    name: str
    label: str
    initial_value: Optional[str] = None
    placeholder: str = ""


class InputScreen(ModalScreen[Optional[Dict[str, str]]]):
    """A modal form of one or more text inputs.

    Dismisses with ``{input name: value}`` on OK or Enter, and with None on
    Cancel or Escape.
    """

    DEFAULT_CSS = """
    InputScreen {
        align: center middle;
    }

    #input_dialog {
        width: 70;
        height: auto;
        padding: 1;
        border: thick $primary;
        background: $boost;
        grid-size: 1;
        grid-rows: auto;
    }

    #input_title {
        text-style: bold;
        padding-bottom: 1;
    }

    #input_fields_container {
        height: auto;
    }

    #input_buttons {
        height: auto;
        align: center middle;
        padding-top: 1;
    }

    Button {
        margin: 0 1;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(
        self,
        title: str,
        inputs: List[InputInfo],
        *,
        confirm_button_text: str | None = None,
        name: str | None = None,
        screen_id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name, screen_id, classes)
        self.title_text = title
        self.inputs_info = inputs
        self.confirm_button_text = confirm_button_text

    def compose(self) -> ComposeResult:
        input_fields = [
            widget
            for info in self.inputs_info
            for widget in (
                Label(info.label),
                Input(value=info.initial_value or "", placeholder=info.placeholder, id=info.name),
            )
        ]

        yield Grid(
            Static(self.title_text, id="input_title"),
            Vertical(*input_fields, id="input_fields_container"),
            Horizontal(
                Button(self.confirm_button_text or "OK", variant="primary", id="input_ok"),
                Button("Cancel", variant="default", id="input_cancel"),
                id="input_buttons",
            ),
            id="input_dialog",
        )

    def on_mount(self) -> None:
        """Focus the first input widget when the screen is mounted."""
        first_input = self.query(Input).first()
        if first_input:
            first_input.focus()

    def _results(self) -> Dict[str, str]:
        return {inp.id: inp.value for inp in self.query(Input) if inp.id is not None}

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(self._results())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "input_ok":
            self.dismiss(self._results())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
