from __future__ import annotations
import logging
from abc import abstractmethod
from typing import ClassVar

from KubeStatus.actions.base_action import BaseAction
from KubeStatus.actions.pod_action_utils import select_container
from KubeStatus.core.exceptions import ActionCancelledError, ActionFailedError
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.resource_registry import Operation
from KubeStatus.kubectl_client import logs_args

log = logging.getLogger(__name__)


def parse_tail_lines(value: str) -> int:
    """Validates a user-entered tail count."""
    value = value.strip()
    if not value.isdigit() or int(value) <= 0:
        raise ActionFailedError(f"Tail lines must be a positive number, got '{value}'.")
    return int(value)


class _LogsAction(BaseAction):
    operation = Operation.LOGS
    follow: ClassVar[bool] = False

    @abstractmethod
    async def _tail_lines(self, obj: KubeObject, container: str) -> int:
        raise NotImplementedError

    async def execute(self, obj: KubeObject) -> None:
        container = await select_container(self.context.ui, obj)
        tail = await self._tail_lines(obj, container)
        args = logs_args(obj.name, obj.namespace, container, tail=tail, follow=self.follow)
        verb = "Streaming logs" if self.follow else "Logs"
        log.info("%s for pod %s/%s, container %s", verb, obj.namespace, obj.name, container)
        self.context.ui.open_stream_view(f"{verb}: {obj.name}/{container}", args)


class ShowLogsAction(_LogsAction):
    """Shows the last N lines of a container's log, N prompted with a configured default."""

    name = "show-logs"

    async def _tail_lines(self, obj: KubeObject, container: str) -> int:
        answer = await self.context.ui.prompt(
            f"Logs for {obj.name}/{container}",
            "Tail lines",
            default=str(self.context.config.log_tail_lines),
        )
        if answer is None:
            raise ActionCancelledError("Log view cancelled.")
        return parse_tail_lines(answer or str(self.context.config.log_tail_lines))


class StreamLogsAction(_LogsAction):
    """Follows a container's log starting from a short tail."""

    name = "stream-logs"
    follow = True

    async def _tail_lines(self, obj: KubeObject, container: str) -> int:
        return self.context.config.stream_tail_lines
