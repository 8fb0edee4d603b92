from __future__ import annotations
import logging
from typing import Optional

from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from KubeStatus.actions.dispatcher import ActionDispatcher
from KubeStatus.core.contexts import UserInterface
from KubeStatus.core.exceptions import KubeStatusError
from KubeStatus.core.session import StatusSession
from KubeStatus.core.table_renderer import RenderedTable

log = logging.getLogger(__name__)


def _line(text: Text) -> Text:
    line = text.copy()
    line.no_wrap = True
    line.overflow = "ellipsis"
    return line


class DashboardScreen(Screen[None]):
    """The status table for one session, with key bindings for every action."""

    DEFAULT_CSS = """
    DashboardScreen #context-header {
        background: $boost;
        padding: 0 1;
    }

    DashboardScreen #column-header {
        padding: 0 1;
        height: 1;
    }

    DashboardScreen OptionList {
        height: 1fr;
        border: none;
        padding: 0;
    }
    """

    BINDINGS = [
        Binding("g", "reload", "Refresh"),
        Binding("n", "select_namespace", "Namespace"),
        Binding("r", "select_resource", "Resource"),
        Binding("slash", "edit_filter", "Filter"),
        Binding("d", "dispatch('delete')", "Delete"),
        Binding("v", "dispatch('view-details')", "View"),
        Binding("l", "dispatch('show-logs')", "Logs"),
        Binding("L", "dispatch('stream-logs')", "Stream logs"),
        Binding("e", "dispatch('exec')", "Exec"),
        Binding("t", "dispatch('exec')", "Terminal", show=False),
        Binding("q", "app.request_quit", "Quit"),
    ]

    def __init__(self, session: StatusSession, dispatcher: ActionDispatcher, ui: UserInterface) -> None:
        super().__init__()
        self.session = session
        self.dispatcher = dispatcher
        self.ui = ui

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="context-header")
        yield Static(id="column-header")
        yield OptionList(id="rows")
        yield Footer()

    def on_mount(self) -> None:
        self.show_table(self.session.rendered)
        self.query_one(OptionList).focus()
        self.action_reload()

    @property
    def selected_index(self) -> Optional[int]:
        return self.query_one(OptionList).highlighted

    def show_table(self, rendered: RenderedTable) -> None:
        """Replaces the displayed rows, keeping the cursor position where possible."""
        self.query_one("#context-header", Static).update(self.session.header_text())
        self.query_one("#column-header", Static).update(_line(rendered.header))

        option_list = self.query_one(OptionList)
        previous = option_list.highlighted
        option_list.clear_options()
        option_list.add_options(
            Option(_line(row.text), disabled=row.source is None) for row in rendered.rows
        )
        if rendered.is_empty:
            return
        if previous is None:
            option_list.highlighted = 0
        else:
            option_list.highlighted = min(previous, len(rendered.rows) - 1)

    def _report(self, error: KubeStatusError) -> None:
        log.error("%s", error)
        self.ui.notify(str(error), severity="error")

    @work(exclusive=True, group="session")
    async def action_reload(self) -> None:
        try:
            await self.session.refresh()
        except KubeStatusError as e:
            self._report(e)
        self.show_table(self.session.rendered)

    @work(exclusive=True, group="session")
    async def action_select_namespace(self) -> None:
        answer = await self.ui.prompt(
            "Select namespace",
            "Namespace (empty for all namespaces)",
            default=self.session.namespace or "",
        )
        if answer is None:
            return
        try:
            await self.session.select_namespace(answer)
        except KubeStatusError as e:
            self._report(e)
        self.show_table(self.session.rendered)

    @work(exclusive=True, group="session")
    async def action_select_resource(self) -> None:
        kinds = sorted(self.session.registry.list_kinds())
        kind = await self.ui.choose("Select resource kind", kinds, default=self.session.resource_kind)
        if kind is None:
            return
        try:
            await self.session.select_resource(kind)
        except KubeStatusError as e:
            self._report(e)
        self.show_table(self.session.rendered)

    @work(exclusive=True, group="session")
    async def action_edit_filter(self) -> None:
        answer = await self.ui.prompt(
            "Filter rows",
            "Regex, or COLUMN: REGEX (empty clears the filter)",
            default=self.session.filter_expression or "",
        )
        if answer is None:
            return
        try:
            await self.session.set_filter(answer)
        except KubeStatusError as e:
            self._report(e)
        self.show_table(self.session.rendered)

    def action_dispatch(self, action_name: str) -> None:
        self.run_action(action_name, self.selected_index)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.run_action("view-details", event.option_index)

    @work(group="actions")
    async def run_action(self, action_name: str, row_index: Optional[int]) -> None:
        await self.dispatcher.dispatch(action_name, row_index)
        self.show_table(self.session.rendered)
