from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Literal

from textual.app import ComposeResult
from textual.containers import Grid, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label


@dataclass
class ButtonInfo:
    """Stores information about a button for the confirmation screen."""

    label: str
    result: Any
    variant: Literal["default", "primary", "success", "warning", "error"] = "primary"


class ConfirmationScreen(ModalScreen[Any]):
    """A modal yes/no style dialog; dismisses with the pressed button's result."""

    DEFAULT_CSS = """
    ConfirmationScreen {
        align: center middle;
    }

    #confirmation-container {
        width: 70;
        height: auto;
        padding: 1;
        border: thick $primary;
        background: $boost;
        grid-size: 1;
        grid-rows: auto;
    }

    #title {
        width: 100%;
        content-align: center middle;
        padding-bottom: 1;
        text-style: bold;
    }

    #prompt {
        width: 100%;
        padding-bottom: 1;
    }

    #buttons {
        width: 100%;
        height: auto;
        align: center middle;
    }

    Button {
        margin: 0 1;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(
        self,
        buttons: list[ButtonInfo],
        title: str | None = None,
        prompt: str | None = None,
        *,
        cancel_result: Any = None,
        name: str | None = None,
        screen_id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name, screen_id, classes)
        self.title_text = title
        self.prompt_text = prompt
        self.buttons_info = buttons
        self.cancel_result = cancel_result

    def compose(self) -> ComposeResult:
        with Grid(id="confirmation-container"):
            if self.title_text:
                yield Label(self.title_text, id="title")
            if self.prompt_text:
                yield Label(self.prompt_text, id="prompt")
            with Horizontal(id="buttons"):
                for i, info in enumerate(self.buttons_info):
                    yield Button(info.label, variant=info.variant, id=f"button_{i}")

    def on_mount(self) -> None:
        self.query_one(Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id is None:
            return
        button_index = int(event.button.id.split("_")[1])
        self.dismiss(self.buttons_info[button_index].result)

    def action_cancel(self) -> None:
        self.dismiss(self.cancel_result)
