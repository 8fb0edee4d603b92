from __future__ import annotations
import logging
from typing import Dict, Iterable, Optional, Type

from KubeStatus.actions.base_action import BaseAction
from KubeStatus.actions.delete_action import DeleteResourceAction
from KubeStatus.actions.exec_action import ExecAction
from KubeStatus.actions.view_details_action import ViewDetailsAction
from KubeStatus.actions.view_logs_action import ShowLogsAction, StreamLogsAction
from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.exceptions import (
    ActionCancelledError,
    KubeStatusError,
    OperationNotAllowedError,
)

log = logging.getLogger(__name__)

DEFAULT_ACTIONS: tuple[Type[BaseAction], ...] = (
    DeleteResourceAction,
    ViewDetailsAction,
    ShowLogsAction,
    StreamLogsAction,
    ExecAction,
)


class ActionDispatcher:
    """Resolves the selected row to an object and runs a named action on it.

    Every dispatch checks that a row resolves to an object and that the
    object's kind allows the action's operation; otherwise the user gets a
    notice and no command is issued.
    """

    def __init__(
        self,
        context: ActionContext,
        action_classes: Iterable[Type[BaseAction]] = DEFAULT_ACTIONS,
    ) -> None:
        self.context = context
        self.actions: Dict[str, BaseAction] = {cls.name: cls(context) for cls in action_classes}

    async def dispatch(self, action_name: str, row_index: Optional[int]) -> bool:
        """Runs ``action_name`` on the object at ``row_index``; True if it completed."""
        ui = self.context.ui
        action = self.actions.get(action_name)
        if action is None:
            ui.notify(f"Unknown action '{action_name}'.", severity="error")
            return False

        obj = self.context.session.object_at(row_index)
        if obj is None:
            ui.notify("No object selected.", severity="warning")
            return False

        try:
            self.context.session.registry.require_operation(obj.kind, action.operation)
        except OperationNotAllowedError as e:
            ui.notify(str(e), severity="warning")
            return False

        log.debug("Dispatching %s on %s", action_name, obj.qualified_name)
        try:
            await action.execute(obj)
        except ActionCancelledError as e:
            ui.notify(str(e))
            return False
        except KubeStatusError as e:
            log.error("Action %s on %s failed: %s", action_name, obj.qualified_name, e)
            ui.notify(str(e), severity="error")
            return False
        return True
