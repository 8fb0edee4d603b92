import json
import shlex
from typing import Any, Optional, Sequence

import pytest

from KubeStatus.actions.dispatcher import ActionDispatcher
from KubeStatus.config import AppConfig
from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.session import StatusSession
from KubeStatus.kubectl_client import KubectlClient


class FakeKubectl(KubectlClient):
    """A KubectlClient that answers from a queue instead of spawning kubectl.

    Queued dicts are returned as JSON text, strings verbatim, and exceptions
    are raised.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.calls: list[list[str]] = []
        self.replies: list[Any] = []

    def queue(self, *replies: Any) -> "FakeKubectl":
        self.replies.extend(replies)
        return self

    async def run(self, args: Sequence[str]) -> str:
        self.calls.append(list(args))
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return reply
        return json.dumps(reply)


class FakeUI:
    """Records everything the actions ask of the user interface."""

    def __init__(self) -> None:
        self.notifications: list[tuple[str, str]] = []
        self.confirmations: list[str] = []
        self.prompts: list[tuple[str, str, str]] = []
        self.choices: list[tuple[str, list[str], Optional[str]]] = []
        self.detail_views: list[tuple[str, list[str]]] = []
        self.stream_views: list[tuple[str, list[str]]] = []
        self.confirm_answer = True
        self.prompt_answer: Optional[str] = None
        self.accept_default = True
        self.choice_answer: Optional[str] = None

    async def confirm(self, prompt: str) -> bool:
        self.confirmations.append(prompt)
        return self.confirm_answer

    async def prompt(self, title: str, label: str, default: str = "") -> Optional[str]:
        self.prompts.append((title, label, default))
        if self.prompt_answer is not None:
            return self.prompt_answer
        return default if self.accept_default else None

    async def choose(
        self, title: str, options: Sequence[str], default: Optional[str] = None
    ) -> Optional[str]:
        self.choices.append((title, list(options), default))
        return self.choice_answer

    def open_detail_view(self, title: str, args: Sequence[str]) -> None:
        self.detail_views.append((title, list(args)))

    def open_stream_view(self, title: str, args: Sequence[str]) -> None:
        self.stream_views.append((title, list(args)))

    def notify(self, message: str, severity: str = "information") -> None:
        self.notifications.append((severity, message))

    def messages(self, severity: Optional[str] = None) -> list[str]:
        return [m for s, m in self.notifications if severity is None or s == severity]


class FakeTerminal:
    def __init__(self) -> None:
        self.launched: list[tuple[list[str], str]] = []

    async def launch_command_in_new_window(self, argv: Sequence[str], window_name: str) -> str:
        self.launched.append((list(argv), window_name))
        return shlex.join(argv)


@pytest.fixture
def config():
    return AppConfig()


@pytest.fixture
def kubectl():
    return FakeKubectl()


@pytest.fixture
def ui():
    return FakeUI()


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def session(kubectl):
    return StatusSession(kubectl)


@pytest.fixture
def dispatcher(config, session, kubectl, ui, terminal):
    context = ActionContext(config=config, session=session, kubectl=kubectl, ui=ui, terminal=terminal)
    return ActionDispatcher(context)
