from __future__ import annotations
import logging

from KubeStatus.actions.base_action import BaseAction
from KubeStatus.core.exceptions import ActionCancelledError
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.resource_registry import Operation
from KubeStatus.kubectl_client import delete_args

log = logging.getLogger(__name__)


class DeleteResourceAction(BaseAction):
    """Deletes the selected object after confirmation.

    The kubectl call is awaited. A failure propagates as KubectlError (full
    command and output) and the table is left as it was; a success refreshes
    the session.
    """

    name = "delete"
    operation = Operation.DELETE

    async def execute(self, obj: KubeObject) -> None:
        where = f" in namespace '{obj.namespace}'" if obj.namespace else ""
        prompt = f"Are you sure you want to delete {obj.qualified_name}{where}?"
        if not await self.context.ui.confirm(prompt):
            raise ActionCancelledError("Delete action cancelled.")

        log.info("User confirmed deletion of %s. Proceeding...", obj.qualified_name)
        output = await self.context.kubectl.run(
            delete_args(obj.kind, obj.name, obj.namespace)
        )
        self.context.ui.notify(output.strip() or f"{obj.qualified_name} deleted")
        await self.context.session.refresh()
