from __future__ import annotations
from typing import Any, Optional, Sequence

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, ListItem, ListView, Static


class ChoiceListItem(ListItem):
    """A ListItem that holds arbitrary data."""

    def __init__(self, *args: Any, data: Any = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.data = data


class ChoiceScreen(ModalScreen[Optional[str]]):
    """Picks one string out of a list; the default option starts highlighted."""

    DEFAULT_CSS = """
    ChoiceScreen {
        align: center middle;
    }

    #choice_dialog {
        width: 60;
        height: auto;
        max-height: 80%;
        padding: 1;
        border: thick $primary;
        background: $boost;
    }

    #choice_title {
        text-style: bold;
        padding-bottom: 1;
    }

    #choice_dialog ListView {
        height: auto;
        max-height: 20;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        title: str,
        options: Sequence[str],
        default: Optional[str] = None,
        *,
        name: str | None = None,
        screen_id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name, screen_id, classes)
        self.title_text = title
        self.options = list(options)
        self.default = default

    def compose(self) -> ComposeResult:
        with Vertical(id="choice_dialog"):
            yield Static(self.title_text, id="choice_title")
            yield ListView(
                *(ChoiceListItem(Label(option), data=option) for option in self.options),
                initial_index=self._initial_index(),
            )
            yield Button("Cancel", variant="default", id="cancel")

    def _initial_index(self) -> int:
        if self.default in self.options:
            return self.options.index(self.default)
        return 0

    def on_mount(self) -> None:
        self.query_one(ListView).focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ChoiceListItem):
            self.dismiss(event.item.data)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
