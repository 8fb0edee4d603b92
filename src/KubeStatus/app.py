from __future__ import annotations
import asyncio
import logging
import sys
from typing import Optional

from textual import work
from textual.app import App

from KubeStatus.actions.dispatcher import ActionDispatcher
from KubeStatus.config import AppConfig
from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.session import StatusSession
from KubeStatus.core.tmux_manager import TmuxManager
from KubeStatus.kubectl_client import KubectlClient
from KubeStatus.logger import AppLogger
from KubeStatus.screens.confirmation_screen import ButtonInfo, ConfirmationScreen
from KubeStatus.screens.dashboard_screen import DashboardScreen
from KubeStatus.ui.textual_ui import TextualUserInterface

log = logging.getLogger(__name__)


class KubeStatus(App[None]):
    """A Textual application showing kubectl-backed resource status."""

    TITLE = "KubeStatus"
    SUB_TITLE = "Kubernetes status dashboard"

    BINDINGS = [
        ("ctrl+d", "toggle_dark", "Toggle Dark Mode"),
        ("ctrl+q", "request_quit", "Quit App"),
    ]

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        super().__init__()
        self._config = config or AppConfig.get_instance()
        self._app_logger = AppLogger.get_instance(self._config)
        self._kubectl = KubectlClient.from_config(self._config)
        self._session = StatusSession(
            self._kubectl,
            resource_kind=self._config.initial_resource,
            namespace=self._config.initial_namespace,
        )
        self._ui = TextualUserInterface(self, self._kubectl)
        self._tmux_manager = TmuxManager.get_instance(
            self._config.session_name, self._config.tmux_socket_path
        )
        self._dispatcher = ActionDispatcher(
            ActionContext(
                config=self._config,
                session=self._session,
                kubectl=self._kubectl,
                ui=self._ui,
                terminal=self._tmux_manager,
            )
        )
        if self._config.kube_context:
            self.sub_title = f"context: {self._config.kube_context}"

    @property
    def config(self) -> AppConfig:
        """Returns the app configuration."""
        return self._config

    @property
    def session(self) -> StatusSession:
        return self._session

    @property
    def dispatcher(self) -> ActionDispatcher:
        return self._dispatcher

    def on_mount(self) -> None:
        log.info(
            "Starting dashboard: resource=%s namespace=%s",
            self._session.resource_kind,
            self._session.namespace or "<all>",
        )
        self.push_screen(DashboardScreen(self._session, self._dispatcher, self._ui))

    def action_toggle_dark(self) -> None:
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"

    @work
    async def action_request_quit(self) -> None:
        """Action to display the quit dialog."""
        buttons = [
            ButtonInfo(label="Quit", result=True, variant="error"),
            ButtonInfo(label="Cancel", result=False, variant="primary"),
        ]
        screen = ConfirmationScreen(
            prompt="Are you sure you want to quit KubeStatus?",
            buttons=buttons,
            cancel_result=False,
        )
        if await self.push_screen_wait(screen):
            self.exit()

    def on_unmount(self) -> None:
        """Called when the app is unmounted."""
        self._app_logger.stop()


async def main(config: Optional[AppConfig] = None) -> None:
    """The main entry point for the KubeStatus TUI application."""
    app = KubeStatus(config)
    await app.run_async()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    asyncio.run(main())
