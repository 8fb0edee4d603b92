from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional

from KubeStatus.core.objects import KubeObject, ObjectList, parse_document
from KubeStatus.core.resource_registry import REGISTRY, ColumnSpec, ResourceRegistry, ResourceType
from KubeStatus.core.row_filter import compile_filter
from KubeStatus.core.table_renderer import (
    RenderedTable,
    build_rows,
    header_row,
    render,
    table_columns,
)
from KubeStatus.kubectl_client import ALL_NAMESPACES, KubectlClient, list_args

log = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def normalize_namespace(namespace: Optional[str]) -> Optional[str]:
    """``None``, ``""`` and ``"all"`` all mean every namespace."""
    if namespace is None:
        return None
    namespace = namespace.strip()
    if namespace in ("", ALL_NAMESPACES):
        return None
    return namespace


class StatusSession:
    """The mutable per-dashboard context.

    Holds the current resource kind, namespace (None means all namespaces),
    filter expression and the last object list, plus the table rendered from
    them. ``refresh`` is the only operation that replaces the object list; it
    is all-or-nothing, so a failed kubectl call or a malformed reply leaves
    the session untouched.
    """

    def __init__(
        self,
        kubectl: KubectlClient,
        resource_kind: str = "pod",
        namespace: Optional[str] = None,
        filter_expression: Optional[str] = None,
        registry: ResourceRegistry = REGISTRY,
    ) -> None:
        self.kubectl = kubectl
        self.registry = registry
        self.resource_kind = registry.resolve_kind(resource_kind)
        self.namespace = normalize_namespace(namespace)
        self.filter_expression = filter_expression or None
        self.last_object_list = ObjectList()
        self._lock = asyncio.Lock()
        self.rendered = _render_table(
            self.resource_type, self.namespace, self.filter_expression, self.last_object_list
        )

    @property
    def resource_type(self) -> ResourceType:
        return self.registry.lookup(self.resource_kind)

    @property
    def all_namespaces(self) -> bool:
        return self.resource_type.has_namespace and self.namespace is None

    def object_at(self, index: Optional[int]) -> Optional[KubeObject]:
        return self.rendered.object_at(index)

    async def refresh(self, kind: Optional[str] = UNSET, namespace: Optional[str] = UNSET) -> RenderedTable:
        """Lists ``kind`` in ``namespace`` and re-renders the table.

        Omitted arguments reuse the current session values.
        """
        async with self._lock:
            target_kind = self.resource_kind if kind is UNSET or kind is None else kind
            resource_type = self.registry.lookup(target_kind)
            target_namespace = self.namespace if namespace is UNSET else normalize_namespace(namespace)
            if not resource_type.has_namespace:
                target_namespace = None

            args = list_args(resource_type.kind, target_namespace, resource_type.has_namespace)
            log.info("Refreshing %s (namespace=%s)", resource_type.kind, target_namespace or "<all>")
            document = await self.kubectl.run_json(args)
            objects = parse_document(document, self.kubectl.argv(args))

            rendered = _render_table(resource_type, target_namespace, self.filter_expression, objects)

            # Nothing above mutates the session; commit everything at once.
            self.last_object_list = objects
            self.resource_kind = resource_type.kind
            self.namespace = target_namespace
            self.rendered = rendered
            return self.rendered

    async def select_namespace(self, namespace: Optional[str]) -> RenderedTable:
        return await self.refresh(namespace=normalize_namespace(namespace))

    async def select_resource(self, kind: str) -> RenderedTable:
        return await self.refresh(kind=self.registry.resolve_kind(kind))

    async def set_filter(self, expression: Optional[str]) -> RenderedTable:
        """Stores a new filter and re-renders the current objects without calling kubectl.

        An empty expression clears the filter. An invalid expression raises
        InvalidFilterError and keeps the previous filter.
        """
        async with self._lock:
            expression = (expression or "").strip() or None
            self.rendered = _render_table(
                self.resource_type, self.namespace, expression, self.last_object_list
            )
            self.filter_expression = expression
            return self.rendered

    def header_text(self) -> str:
        """One-line description of the session context."""
        if not self.resource_type.has_namespace:
            namespace = "(cluster)"
        else:
            namespace = self.namespace or "(all)"
        shown = 0 if self.rendered.is_empty else len(self.rendered.rows)
        parts = [
            f"Resource: {self.resource_kind}",
            f"Namespace: {namespace}",
            f"Filter: {self.filter_expression or '(none)'}",
            f"Objects: {shown}/{len(self.last_object_list)}",
        ]
        return "   ".join(parts)


def _columns(resource_type: ResourceType, namespace: Optional[str]) -> tuple[ColumnSpec, ...]:
    return table_columns(resource_type, show_namespace=namespace is None)


def _render_table(
    resource_type: ResourceType,
    namespace: Optional[str],
    filter_expression: Optional[str],
    objects: ObjectList,
) -> RenderedTable:
    columns = _columns(resource_type, namespace)
    rows = build_rows(columns, objects)
    if filter_expression:
        rows = compile_filter(filter_expression, columns).apply(rows)
    return render(header_row(columns), rows)
