from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from KubeStatus.actions.base_action import BaseAction
from KubeStatus.actions.pod_action_utils import select_container
from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.exceptions import ActionFailedError
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.path_extractor import extract, path
from KubeStatus.core.resource_registry import Operation
from KubeStatus.kubectl_client import exec_args

log = logging.getLogger(__name__)

_PROVIDER_ID = re.compile(r"^gce://(?P<project>[^/]+)/(?P<zone>[^/]+)/(?P<host>[^/]+)$")


@dataclass(frozen=True)
class ProviderId:
    project: str
    zone: str
    host: str


def parse_provider_id(provider_id: Optional[str]) -> Optional[ProviderId]:
    """Parses ``gce://<project>/<zone>/<host>``; anything else yields None."""
    if not provider_id:
        return None
    match = _PROVIDER_ID.match(provider_id.strip())
    if not match:
        return None
    return ProviderId(**match.groupdict())


class ExecAction(BaseAction):
    """Opens an interactive session for the selected object in a new tmux window.

    The launcher is chosen by the selected object's kind: pods get a shell
    inside a container, nodes an ssh session through gcloud.
    """

    name = "exec"
    operation = Operation.EXEC

    def __init__(self, context: ActionContext) -> None:
        super().__init__(context)
        self._launchers: Dict[str, Callable[[KubeObject], Awaitable[None]]] = {
            "pod": self._exec_into_pod,
            "node": self._ssh_into_node,
        }

    async def execute(self, obj: KubeObject) -> None:
        launcher = self._launchers.get(obj.kind)
        if launcher is None:
            self.context.ui.notify(f"Exec is not supported for {obj.kind}.", severity="warning")
            return
        await launcher(obj)

    async def _exec_into_pod(self, pod: KubeObject) -> None:
        container = await select_container(self.context.ui, pod)
        argv = self.context.kubectl.argv(
            exec_args(pod.name, pod.namespace, container, self.context.config.exec_shell)
        )
        await self.context.terminal.launch_command_in_new_window(
            argv, window_name=f"exec:{pod.name}/{container}"
        )
        self.context.ui.notify(f"Exec session started for {pod.name}/{container}")

    async def _ssh_into_node(self, node: KubeObject) -> None:
        provider_id = extract(path("spec.providerID"), node.raw)
        parsed = parse_provider_id(provider_id)
        if parsed is None:
            raise ActionFailedError(
                f"Cannot ssh into node '{node.name}': unsupported provider id '{provider_id or ''}'."
            )
        argv = [
            self.context.config.gcloud_binary,
            "compute",
            "ssh",
            "--zone",
            parsed.zone,
            parsed.host,
        ]
        await self.context.terminal.launch_command_in_new_window(
            argv, window_name=f"ssh:{parsed.host}"
        )
        self.context.ui.notify(f"SSH session started for {parsed.host}")
