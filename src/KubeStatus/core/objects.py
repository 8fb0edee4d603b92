from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from KubeStatus.core.exceptions import MalformedOutputError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubeObject:
    """A single resource as returned by kubectl.

    ``raw`` is the full parsed document; every displayed value is derived
    from it on demand.
    """

    kind: str
    name: str
    namespace: str | None
    raw: dict[str, Any] = field(repr=False, compare=True, hash=False)

    @property
    def qualified_name(self) -> str:
        """``<kind>/<name>`` as accepted by kubectl."""
        return f"{self.kind}/{self.name}"

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> KubeObject:
        metadata = document.get("metadata") or {}
        return cls(
            kind=str(document.get("kind", "")).lower(),
            name=str(metadata.get("name", "")),
            namespace=metadata.get("namespace") or None,
            raw=document,
        )


@dataclass(frozen=True)
class ObjectList:
    """An ordered sequence of KubeObjects."""

    items: tuple[KubeObject, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[KubeObject]:
        return iter(self.items)

    def __getitem__(self, index: int) -> KubeObject:
        return self.items[index]


def _flatten(document: Any) -> Iterator[KubeObject]:
    if not isinstance(document, dict):
        raise ValueError(f"expected a JSON object, got {type(document).__name__}")
    if document.get("kind") == "List":
        items = document.get("items") or []
        if not isinstance(items, list):
            raise ValueError("'items' of a List document is not an array")
        for item in items:
            yield from _flatten(item)
    else:
        yield KubeObject.from_document(document)


def parse_document(document: Any, argv: list[str] | None = None) -> ObjectList:
    """Turns a parsed kubectl JSON reply into an ObjectList.

    ``kind: List`` documents are unwrapped recursively; any other document is
    promoted to a one-item list.
    """
    try:
        objects = tuple(_flatten(document))
    except ValueError as e:
        raise MalformedOutputError(argv or [], repr(document)[:500], str(e)) from e
    log.debug("Parsed %d object(s) from kubectl reply", len(objects))
    return ObjectList(items=objects)
