from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Literal

from KubeStatus.core.exceptions import OperationNotAllowedError, ResourceNotFoundError
from KubeStatus.core.path_extractor import (
    PathProgram,
    Transform,
    address_of_type,
    condition_status,
    count,
    default,
    extract,
    first_present,
    human_age,
    join,
    key_count,
    path,
    pluck,
    port_summary,
    ready_count,
    restart_count,
)

log = logging.getLogger(__name__)


class Operation(str, Enum):
    """Operations the dashboard can perform on a selected object."""

    DELETE = "delete"
    EXEC = "exec"
    VIEW = "view-details"
    LOGS = "logs"


DEFAULT_OPERATIONS: frozenset[Operation] = frozenset({Operation.DELETE, Operation.VIEW})


@dataclass(frozen=True)
class ColumnSpec:
    """Defines how a single table column is derived and displayed."""

    name: str
    program: PathProgram
    format_hint: Literal["text", "list", "bool"] = "text"
    align: Literal["left", "right"] = "left"
    style: str | None = None
    min_width: int = 0


@dataclass(frozen=True)
class ResourceType:
    """Defines the display and action metadata for a single resource kind."""

    kind: str
    columns: tuple[ColumnSpec, ...]
    has_namespace: bool = True
    allowed_ops: frozenset[Operation] = field(default=DEFAULT_OPERATIONS)
    aliases: tuple[str, ...] = ()

    def column(self, name: str) -> ColumnSpec | None:
        """Case-insensitive column lookup by header name."""
        wanted = name.strip().lower()
        return next((c for c in self.columns if c.name.lower() == wanted), None)


# --- Column helpers ---
# Small composite projections shared by several kinds.


def _ratio(numerator: str, denominator: str) -> Transform:
    """``<numerator>/<denominator>`` from two dotted paths of the same document."""
    num_program = path(numerator)
    den_program = path(denominator)

    def _format(document: Any) -> str:
        num = extract(num_program, document) or 0
        den = extract(den_program, document) or 0
        return f"{num}/{den}"

    return Transform(_format, f"ratio({numerator},{denominator})")


def _kind_slash_name(kind_key: str = "kind", name_key: str = "name") -> Transform:
    def _format(ref: Any) -> str | None:
        if not isinstance(ref, dict) or not ref.get(name_key):
            return None
        return f"{ref.get(kind_key, '')}/{ref.get(name_key)}".lstrip("/")

    return Transform(_format, "kind_slash_name")


def _namespace_slash_name(ref: Any) -> str | None:
    if not isinstance(ref, dict) or not ref.get("name"):
        return None
    if ref.get("namespace"):
        return f"{ref['namespace']}/{ref['name']}"
    return str(ref["name"])


def _endpoint_addresses(subsets: Any) -> str:
    endpoints = []
    for subset in subsets if isinstance(subsets, list) else []:
        ports = [p.get("port") for p in subset.get("ports", []) if isinstance(p, dict)] or [None]
        for address in subset.get("addresses", []):
            for port in ports:
                ip = address.get("ip", "")
                endpoints.append(f"{ip}:{port}" if port is not None else ip)
    return ",".join(endpoints) or "<none>"


def _label_pairs(labels: Any) -> str:
    if not isinstance(labels, dict) or not labels:
        return "<none>"
    return ",".join(f"{k}={v}" for k, v in labels.items())


def _ready_word(status: Any) -> str | None:
    if status is None:
        return None
    return "Ready" if status == "True" else "NotReady"


def _healthy_word(status: Any) -> str | None:
    if status is None:
        return None
    return "Healthy" if status == "True" else "Unhealthy"


NAME = ColumnSpec("Name", path("metadata.name"), style="bold")
NAMESPACE = ColumnSpec("Namespace", path("metadata.namespace"))
AGE = ColumnSpec(
    "Age", path("metadata.creationTimestamp", human_age), align="right", style="dim"
)

# events.k8s.io events leave lastTimestamp null.
_EVENT_LAST_SEEN = path(
    "",
    first_present(
        path("lastTimestamp"),
        path("series.lastObservedTime"),
        path("eventTime"),
        path("metadata.creationTimestamp"),
    ),
    human_age,
)


def _columns(*columns: ColumnSpec) -> tuple[ColumnSpec, ...]:
    return (NAME, *columns, AGE)


# This is the central, unified registry of every resource kind the dashboard
# knows how to display. It is the single source of truth for columns,
# namespacing and permitted operations.

_RESOURCE_TYPES: tuple[ResourceType, ...] = (
    ResourceType(
        kind="pod",
        aliases=("pods", "po"),
        allowed_ops=frozenset(
            {Operation.DELETE, Operation.EXEC, Operation.VIEW, Operation.LOGS}
        ),
        columns=_columns(
            ColumnSpec("Ready", path("status.containerStatuses", ready_count), align="right"),
            ColumnSpec("Status", path("status.phase")),
            ColumnSpec(
                "Restarts",
                path("status.containerStatuses", restart_count),
                align="right",
                style="yellow",
            ),
            ColumnSpec("IP", path("status.podIP")),
            ColumnSpec("Node", path("spec.nodeName")),
        ),
    ),
    ResourceType(
        kind="node",
        aliases=("nodes", "no"),
        has_namespace=False,
        allowed_ops=frozenset({Operation.EXEC, Operation.VIEW}),
        columns=_columns(
            ColumnSpec(
                "Status",
                path("status.conditions", condition_status("Ready"), Transform(_ready_word)),
            ),
            ColumnSpec("Version", path("status.nodeInfo.kubeletVersion")),
            ColumnSpec("Internal-IP", path("status.addresses", address_of_type("InternalIP"))),
            ColumnSpec("External-IP", path("status.addresses", address_of_type("ExternalIP"))),
        ),
    ),
    ResourceType(
        kind="service",
        aliases=("services", "svc"),
        columns=_columns(
            ColumnSpec("Type", path("spec.type")),
            ColumnSpec("Cluster-IP", path("spec.clusterIP")),
            ColumnSpec(
                "External-IP",
                path("status.loadBalancer.ingress", pluck("ip"), join(","), default("<none>")),
            ),
            ColumnSpec("Ports", path("spec.ports", port_summary)),
        ),
    ),
    ResourceType(
        kind="deployment",
        aliases=("deployments", "deploy"),
        columns=_columns(
            ColumnSpec("Ready", path("", _ratio("status.readyReplicas", "spec.replicas")), align="right"),
            ColumnSpec("Up-to-date", path("status.updatedReplicas", default(0)), align="right"),
            ColumnSpec("Available", path("status.availableReplicas", default(0)), align="right"),
        ),
    ),
    ResourceType(
        kind="namespace",
        aliases=("namespaces", "ns"),
        has_namespace=False,
        columns=_columns(ColumnSpec("Status", path("status.phase"))),
    ),
    ResourceType(
        kind="replicaset",
        aliases=("replicasets", "rs"),
        columns=_columns(
            ColumnSpec("Desired", path("spec.replicas", default(0)), align="right"),
            ColumnSpec("Current", path("status.replicas", default(0)), align="right"),
            ColumnSpec("Ready", path("status.readyReplicas", default(0)), align="right"),
        ),
    ),
    ResourceType(
        kind="statefulset",
        aliases=("statefulsets", "sts"),
        columns=_columns(
            ColumnSpec("Ready", path("", _ratio("status.readyReplicas", "spec.replicas")), align="right"),
        ),
    ),
    ResourceType(
        kind="daemonset",
        aliases=("daemonsets", "ds"),
        columns=_columns(
            ColumnSpec("Desired", path("status.desiredNumberScheduled", default(0)), align="right"),
            ColumnSpec("Current", path("status.currentNumberScheduled", default(0)), align="right"),
            ColumnSpec("Ready", path("status.numberReady", default(0)), align="right"),
            ColumnSpec("Up-to-date", path("status.updatedNumberScheduled", default(0)), align="right"),
            ColumnSpec("Available", path("status.numberAvailable", default(0)), align="right"),
        ),
    ),
    ResourceType(
        kind="job",
        aliases=("jobs",),
        columns=_columns(
            ColumnSpec("Completions", path("", _ratio("status.succeeded", "spec.completions")), align="right"),
        ),
    ),
    ResourceType(
        kind="cronjob",
        aliases=("cronjobs", "cj"),
        columns=_columns(
            ColumnSpec("Schedule", path("spec.schedule")),
            ColumnSpec("Suspend", path("spec.suspend", default(False)), format_hint="bool"),
            ColumnSpec("Active", path("status.active", count), align="right"),
            ColumnSpec("Last-Schedule", path("status.lastScheduleTime", human_age), align="right"),
        ),
    ),
    ResourceType(
        kind="configmap",
        aliases=("configmaps", "cm"),
        columns=_columns(ColumnSpec("Data", path("data", key_count), align="right")),
    ),
    ResourceType(
        kind="secret",
        aliases=("secrets",),
        columns=_columns(
            ColumnSpec("Type", path("type")),
            ColumnSpec("Data", path("data", key_count), align="right"),
        ),
    ),
    ResourceType(
        kind="ingress",
        aliases=("ingresses", "ing"),
        columns=_columns(
            ColumnSpec("Class", path("spec.ingressClassName", default("<none>"))),
            ColumnSpec("Hosts", path("spec.rules", pluck("host"), default(["*"])), format_hint="list"),
            ColumnSpec("Address", path("status.loadBalancer.ingress", pluck("ip")), format_hint="list"),
        ),
    ),
    ResourceType(
        kind="persistentvolume",
        aliases=("persistentvolumes", "pv"),
        has_namespace=False,
        columns=_columns(
            ColumnSpec("Capacity", path("spec.capacity.storage"), align="right"),
            ColumnSpec("Access-Modes", path("spec.accessModes"), format_hint="list"),
            ColumnSpec("Reclaim-Policy", path("spec.persistentVolumeReclaimPolicy")),
            ColumnSpec("Status", path("status.phase")),
            ColumnSpec("Claim", path("spec.claimRef", Transform(_namespace_slash_name))),
            ColumnSpec("StorageClass", path("spec.storageClassName")),
        ),
    ),
    ResourceType(
        kind="persistentvolumeclaim",
        aliases=("persistentvolumeclaims", "pvc", "pvcs"),
        columns=_columns(
            ColumnSpec("Status", path("status.phase")),
            ColumnSpec("Volume", path("spec.volumeName")),
            ColumnSpec("Capacity", path("status.capacity.storage"), align="right"),
            ColumnSpec("Access-Modes", path("status.accessModes"), format_hint="list"),
            ColumnSpec("StorageClass", path("spec.storageClassName")),
        ),
    ),
    ResourceType(
        kind="storageclass",
        aliases=("storageclasses", "sc"),
        has_namespace=False,
        columns=_columns(
            ColumnSpec("Provisioner", path("provisioner")),
            ColumnSpec("Reclaim-Policy", path("reclaimPolicy")),
            ColumnSpec("Binding-Mode", path("volumeBindingMode")),
        ),
    ),
    ResourceType(
        kind="serviceaccount",
        aliases=("serviceaccounts", "sa"),
        columns=_columns(ColumnSpec("Secrets", path("secrets", count), align="right")),
    ),
    ResourceType(
        kind="endpoints",
        aliases=("ep",),
        columns=_columns(ColumnSpec("Endpoints", path("subsets", Transform(_endpoint_addresses)))),
    ),
    ResourceType(
        kind="event",
        aliases=("events", "ev"),
        columns=(
            ColumnSpec("Last-Seen", _EVENT_LAST_SEEN, align="right", style="dim"),
            ColumnSpec("Type", path("type")),
            ColumnSpec("Reason", path("reason")),
            ColumnSpec("Object", path("involvedObject", _kind_slash_name())),
            ColumnSpec("Message", path("message")),
            NAME,
        ),
    ),
    ResourceType(
        kind="horizontalpodautoscaler",
        aliases=("horizontalpodautoscalers", "hpa"),
        columns=_columns(
            ColumnSpec("Reference", path("spec.scaleTargetRef", _kind_slash_name())),
            ColumnSpec("MinPods", path("spec.minReplicas", default(1)), align="right"),
            ColumnSpec("MaxPods", path("spec.maxReplicas"), align="right"),
            ColumnSpec("Replicas", path("status.currentReplicas", default(0)), align="right"),
        ),
    ),
    ResourceType(
        kind="role",
        aliases=("roles",),
        columns=_columns(),
    ),
    ResourceType(
        kind="rolebinding",
        aliases=("rolebindings",),
        columns=_columns(ColumnSpec("Role", path("roleRef", _kind_slash_name()))),
    ),
    ResourceType(
        kind="clusterrole",
        aliases=("clusterroles",),
        has_namespace=False,
        columns=_columns(),
    ),
    ResourceType(
        kind="clusterrolebinding",
        aliases=("clusterrolebindings",),
        has_namespace=False,
        columns=_columns(ColumnSpec("Role", path("roleRef", _kind_slash_name()))),
    ),
    ResourceType(
        kind="networkpolicy",
        aliases=("networkpolicies", "netpol"),
        columns=_columns(
            ColumnSpec("Pod-Selector", path("spec.podSelector.matchLabels", Transform(_label_pairs))),
        ),
    ),
    ResourceType(
        kind="componentstatus",
        aliases=("componentstatuses", "cs"),
        has_namespace=False,
        allowed_ops=frozenset({Operation.VIEW}),
        columns=(
            NAME,
            ColumnSpec(
                "Status",
                path("conditions", condition_status("Healthy"), Transform(_healthy_word)),
            ),
            ColumnSpec("Message", path("conditions.0.message")),
            ColumnSpec("Error", path("conditions.0.error")),
        ),
    ),
)


class ResourceRegistry:
    """Lookup table from kind (or alias) to ResourceType."""

    def __init__(self, resource_types: Iterable[ResourceType]) -> None:
        self._types: dict[str, ResourceType] = {}
        self._aliases: dict[str, str] = {}
        for resource_type in resource_types:
            if resource_type.kind in self._types:
                raise ValueError(f"Duplicate resource kind '{resource_type.kind}'")
            self._types[resource_type.kind] = resource_type
            for alias in resource_type.aliases:
                self._aliases[alias] = resource_type.kind
        log.debug("Resource registry initialised with %d kinds", len(self._types))

    def resolve_kind(self, kind: str) -> str:
        """Normalises a user-supplied kind or alias to its registered kind name."""
        name = kind.strip().lower()
        if name in self._types:
            return name
        if name in self._aliases:
            return self._aliases[name]
        raise ResourceNotFoundError(kind)

    def lookup(self, kind: str) -> ResourceType:
        return self._types[self.resolve_kind(kind)]

    def list_kinds(self) -> set[str]:
        return set(self._types)

    def is_operation_allowed(self, kind: str, operation: Operation) -> bool:
        try:
            return operation in self.lookup(kind).allowed_ops
        except ResourceNotFoundError:
            return False

    def require_operation(self, kind: str, operation: Operation) -> ResourceType:
        """Like ``lookup``, but raises OperationNotAllowedError when ``operation`` is not allowed."""
        if not self.is_operation_allowed(kind, operation):
            raise OperationNotAllowedError(kind, operation.value)
        return self.lookup(kind)


REGISTRY = ResourceRegistry(_RESOURCE_TYPES)


def lookup(kind: str) -> ResourceType:
    return REGISTRY.lookup(kind)


def list_kinds() -> set[str]:
    return REGISTRY.list_kinds()


def is_operation_allowed(kind: str, operation: Operation) -> bool:
    return REGISTRY.is_operation_allowed(kind, operation)
