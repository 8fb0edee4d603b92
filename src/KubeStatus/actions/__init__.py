from .base_action import BaseAction
from .delete_action import DeleteResourceAction
from .dispatcher import DEFAULT_ACTIONS, ActionDispatcher
from .exec_action import ExecAction
from .view_details_action import ViewDetailsAction
from .view_logs_action import ShowLogsAction, StreamLogsAction

__all__ = [
    "ActionDispatcher",
    "BaseAction",
    "DEFAULT_ACTIONS",
    "DeleteResourceAction",
    "ExecAction",
    "ShowLogsAction",
    "StreamLogsAction",
    "ViewDetailsAction",
]
