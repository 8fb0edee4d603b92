from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar
import logging

from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.resource_registry import Operation


log = logging.getLogger(__name__)


class BaseAction(ABC):
    """Abstract base class for all actions.

    ``operation`` is the registry permission the action requires; the
    dispatcher refuses to run the action on kinds that do not allow it.
    """

    name: ClassVar[str]
    operation: ClassVar[Operation]

    def __init__(self, context: ActionContext):
        self.context = context

    @abstractmethod
    async def execute(self, obj: KubeObject) -> None:
        raise NotImplementedError
