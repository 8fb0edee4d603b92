from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from KubeStatus.config import AppConfig
    from KubeStatus.core.session import StatusSession
    from KubeStatus.kubectl_client import KubectlClient


Severity = Literal["information", "warning", "error"]


class UserInterface(Protocol):
    """What actions need from the host surface."""

    async def confirm(self, prompt: str) -> bool: ...

    async def prompt(self, title: str, label: str, default: str = "") -> Optional[str]: ...

    async def choose(
        self, title: str, options: Sequence[str], default: Optional[str] = None
    ) -> Optional[str]: ...

    def open_detail_view(self, title: str, args: Sequence[str]) -> None:
        """Runs ``args`` through kubectl in the background and shows the output read-only."""

    def open_stream_view(self, title: str, args: Sequence[str]) -> None:
        """Streams the output of ``args`` into an independent view."""

    def notify(self, message: str, severity: Severity = "information") -> None: ...


class TerminalLauncher(Protocol):
    async def launch_command_in_new_window(self, argv: Sequence[str], window_name: str) -> str: ...


@dataclass
class ActionContext:
    """
    Provides the necessary services and data for an Action to execute.
    """

    config: AppConfig
    session: StatusSession
    kubectl: KubectlClient
    ui: UserInterface
    terminal: TerminalLauncher
