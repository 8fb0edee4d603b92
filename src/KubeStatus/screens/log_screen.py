from __future__ import annotations
import logging
from typing import Sequence

from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Footer, RichLog, Static

from KubeStatus.kubectl_client import KubectlClient

log = logging.getLogger(__name__)

MAX_LOG_LINES = 10000


class LogScreen(Screen[None]):
    """Streams the output of a long-running kubectl command.

    Closing the screen cancels its worker, which terminates the subprocess.
    """

    DEFAULT_CSS = """
    LogScreen #log-title {
        background: $primary;
        color: $text;
        text-style: bold;
        padding: 0 1;
    }

    LogScreen RichLog {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("escape", "app.pop_screen", "Close"),
        ("q", "app.pop_screen", "Close"),
        ("c", "clear", "Clear"),
    ]

    def __init__(self, title: str, kubectl: KubectlClient, args: Sequence[str]) -> None:
        super().__init__()
        self.title_text = title
        self.kubectl = kubectl
        self.args = list(args)

    def compose(self) -> ComposeResult:
        yield Static(self.title_text, id="log-title")
        yield RichLog(max_lines=MAX_LOG_LINES, wrap=False, markup=False, highlight=False, id="log-output")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(RichLog).focus()
        self.stream_output()

    def action_clear(self) -> None:
        self.query_one(RichLog).clear()

    @work(exclusive=True)
    async def stream_output(self) -> None:
        output = self.query_one(RichLog)
        output.write(Text(f"$ {self.kubectl.command_string(self.args)}", style="dim"))
        async for line in self.kubectl.stream(self.args):
            output.write(Text(line))
        log.debug("Stream finished: %s", self.title_text)
