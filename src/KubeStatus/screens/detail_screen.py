from __future__ import annotations
import logging
from typing import Sequence

from textual import work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static, TextArea

from KubeStatus.core.exceptions import KubeStatusError
from KubeStatus.kubectl_client import KubectlClient

log = logging.getLogger(__name__)


class DetailScreen(Screen[None]):
    """Read-only view of a kubectl command's output, typically ``get -o yaml``.

    The command runs in a worker owned by this screen; a failure is shown in
    place of the output instead of being raised.
    """

    DEFAULT_CSS = """
    DetailScreen #detail-title {
        background: $primary;
        color: $text;
        text-style: bold;
        padding: 0 1;
    }

    DetailScreen TextArea {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("escape", "app.pop_screen", "Close"),
        ("q", "app.pop_screen", "Close"),
    ]

    def __init__(self, title: str, kubectl: KubectlClient, args: Sequence[str]) -> None:
        super().__init__()
        self.title_text = title
        self.kubectl = kubectl
        self.args = list(args)

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self.title_text, id="detail-title")
            yield TextArea.code_editor(
                text=f"Loading: {self.kubectl.command_string(self.args)}",
                language="yaml",
                theme="monokai",
                read_only=True,
                id="detail-text",
            )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(TextArea).focus()
        self.load_output()

    @work(exclusive=True)
    async def load_output(self) -> None:
        try:
            output = await self.kubectl.run(self.args)
        except KubeStatusError as e:
            log.warning("Detail view for %s failed: %s", self.title_text, e)
            output = str(e)
        self.query_one(TextArea).load_text(output)
