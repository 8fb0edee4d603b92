from __future__ import annotations
from typing import Any, Dict, List

from KubeStatus.core.contexts import UserInterface
from KubeStatus.core.exceptions import ActionCancelledError, ActionFailedError
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.path_extractor import extract, path, pluck

_STATUS_NAMES = path("status.containerStatuses", pluck("name"))
_SPEC_NAMES = path("spec.containers", pluck("name"))


def get_container_names(pod: Dict[str, Any]) -> List[str]:
    """
    Container names of a pod, taken from its status document and falling back
    to ``spec.containers`` for pods that have not reported container statuses yet.
    """
    return extract(_STATUS_NAMES, pod) or extract(_SPEC_NAMES, pod) or []


async def select_container(ui: UserInterface, pod: KubeObject) -> str:
    """
    Returns the container to act on. A single container is selected
    automatically; several prompt a choice that defaults to the first.
    """
    names = get_container_names(pod.raw)
    if not names:
        raise ActionFailedError(f"Pod '{pod.name}' has no containers to select from.")
    if len(names) == 1:
        return names[0]

    choice = await ui.choose(f"Select a container in {pod.name}", names, default=names[0])
    if choice is None:
        raise ActionCancelledError("Container selection cancelled.")
    return choice
