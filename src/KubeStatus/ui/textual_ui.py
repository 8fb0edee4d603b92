from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional, Sequence

from KubeStatus.core.contexts import Severity
from KubeStatus.kubectl_client import KubectlClient
from KubeStatus.screens.choice_screen import ChoiceScreen
from KubeStatus.screens.confirmation_screen import ButtonInfo, ConfirmationScreen
from KubeStatus.screens.detail_screen import DetailScreen
from KubeStatus.screens.input_screen import InputInfo, InputScreen
from KubeStatus.screens.log_screen import LogScreen

if TYPE_CHECKING:
    from textual.app import App

log = logging.getLogger(__name__)


class TextualUserInterface:
    """Implements the actions' user-facing needs with Textual screens.

    ``confirm``, ``prompt`` and ``choose`` wait on modal screens, so they
    must be awaited from inside a Textual worker.
    """

    def __init__(self, app: App, kubectl: KubectlClient) -> None:
        self.app = app
        self.kubectl = kubectl

    async def confirm(self, prompt: str) -> bool:
        buttons = [
            ButtonInfo(label="Yes", result=True, variant="error"),
            ButtonInfo(label="No", result=False, variant="primary"),
        ]
        screen = ConfirmationScreen(buttons=buttons, title="Confirm", prompt=prompt, cancel_result=False)
        return bool(await self.app.push_screen_wait(screen))

    async def prompt(self, title: str, label: str, default: str = "") -> Optional[str]:
        screen = InputScreen(title, [InputInfo(name="value", label=label, initial_value=default)])
        results = await self.app.push_screen_wait(screen)
        if results is None:
            return None
        return results.get("value", "")

    async def choose(
        self, title: str, options: Sequence[str], default: Optional[str] = None
    ) -> Optional[str]:
        return await self.app.push_screen_wait(ChoiceScreen(title, options, default))

    def open_detail_view(self, title: str, args: Sequence[str]) -> None:
        self.app.push_screen(DetailScreen(title, self.kubectl, args))

    def open_stream_view(self, title: str, args: Sequence[str]) -> None:
        self.app.push_screen(LogScreen(title, self.kubectl, args))

    def notify(self, message: str, severity: Severity = "information") -> None:
        log.debug("notify(%s): %s", severity, message)
        timeout = 10 if severity == "error" else 5
        self.app.notify(message, severity=severity, timeout=timeout)
