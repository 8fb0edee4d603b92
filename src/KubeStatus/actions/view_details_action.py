from __future__ import annotations
import logging

from KubeStatus.actions.base_action import BaseAction
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.resource_registry import Operation
from KubeStatus.kubectl_client import view_args

log = logging.getLogger(__name__)


class ViewDetailsAction(BaseAction):
    """Shows ``kubectl get -o yaml`` of the selected object in a read-only view."""

    name = "view-details"
    operation = Operation.VIEW

    async def execute(self, obj: KubeObject) -> None:
        args = view_args(obj.kind, obj.name, obj.namespace)
        title = obj.qualified_name if not obj.namespace else f"{obj.namespace}/{obj.qualified_name}"
        log.debug("Opening detail view for %s", title)
        self.context.ui.open_detail_view(title, args)
