import pytest
from freezegun import freeze_time

from KubeStatus.core.exceptions import OperationNotAllowedError, ResourceNotFoundError
from KubeStatus.core.path_extractor import extract
from KubeStatus.core.resource_registry import (
    REGISTRY,
    Operation,
    is_operation_allowed,
    list_kinds,
    lookup,
)

EXPECTED_KINDS = {
    "pod",
    "node",
    "service",
    "deployment",
    "namespace",
    "replicaset",
    "statefulset",
    "daemonset",
    "job",
    "cronjob",
    "configmap",
    "secret",
    "ingress",
    "persistentvolume",
    "persistentvolumeclaim",
    "storageclass",
    "serviceaccount",
    "endpoints",
    "event",
    "horizontalpodautoscaler",
    "role",
    "rolebinding",
    "clusterrole",
    "clusterrolebinding",
    "networkpolicy",
    "componentstatus",
}

CLUSTER_SCOPED = {
    "node",
    "namespace",
    "persistentvolume",
    "storageclass",
    "clusterrole",
    "clusterrolebinding",
    "componentstatus",
}


class TestRegistryContents:
    def test_all_kinds_registered(self):
        assert list_kinds() == EXPECTED_KINDS

    @pytest.mark.parametrize("kind", sorted(EXPECTED_KINDS))
    def test_namespacing(self, kind):
        assert lookup(kind).has_namespace == (kind not in CLUSTER_SCOPED)

    @pytest.mark.parametrize("kind", sorted(EXPECTED_KINDS))
    def test_every_kind_has_a_name_column(self, kind):
        assert lookup(kind).column("name") is not None

    def test_pod_operations(self):
        assert lookup("pod").allowed_ops == {
            Operation.DELETE,
            Operation.EXEC,
            Operation.VIEW,
            Operation.LOGS,
        }

    def test_node_operations(self):
        assert lookup("node").allowed_ops == {Operation.EXEC, Operation.VIEW}

    def test_componentstatus_is_view_only(self):
        assert lookup("componentstatus").allowed_ops == {Operation.VIEW}

    @pytest.mark.parametrize("kind", sorted(EXPECTED_KINDS - {"pod", "node", "componentstatus"}))
    def test_default_operations(self, kind):
        assert lookup(kind).allowed_ops == {Operation.DELETE, Operation.VIEW}


class TestLookup:
    @pytest.mark.parametrize(
        "alias, kind",
        [
            ("pods", "pod"),
            ("po", "pod"),
            ("Pod", "pod"),
            ("svc", "service"),
            ("deploy", "deployment"),
            ("ns", "namespace"),
            ("pvc", "persistentvolumeclaim"),
            (" cs ", "componentstatus"),
        ],
    )
    def test_aliases(self, alias, kind):
        assert lookup(alias).kind == kind

    def test_unknown_kind(self):
        with pytest.raises(ResourceNotFoundError, match="widget"):
            lookup("widget")

    def test_column_lookup_is_case_insensitive(self):
        assert lookup("pod").column("restarts").name == "Restarts"
        assert lookup("pod").column("missing") is None


class TestOperations:
    def test_delete_rejected_for_componentstatus(self):
        assert not is_operation_allowed("componentstatus", Operation.DELETE)

    def test_logs_only_for_pods(self):
        assert is_operation_allowed("pod", Operation.LOGS)
        assert not is_operation_allowed("deployment", Operation.LOGS)

    def test_unknown_kind_allows_nothing(self):
        assert not is_operation_allowed("widget", Operation.VIEW)

    def test_require_operation(self):
        assert REGISTRY.require_operation("po", Operation.EXEC).kind == "pod"
        with pytest.raises(OperationNotAllowedError, match="componentstatus"):
            REGISTRY.require_operation("componentstatus", Operation.DELETE)


class TestEventLastSeen:
    @pytest.fixture
    def last_seen(self):
        return lookup("event").column("last-seen")

    @freeze_time("2025-06-16T14:00:00Z")
    def test_legacy_last_timestamp(self, last_seen):
        event = {"lastTimestamp": "2025-06-16T13:55:00Z", "eventTime": None}
        assert extract(last_seen.program, event) == "05:00"

    @freeze_time("2025-06-16T14:00:00Z")
    def test_event_time_when_last_timestamp_is_null(self, last_seen):
        event = {"lastTimestamp": None, "eventTime": "2025-06-16T13:58:00.123456Z"}
        assert extract(last_seen.program, event) == "02:00"

    @freeze_time("2025-06-16T14:00:00Z")
    def test_series_last_observed_time_wins_over_event_time(self, last_seen):
        event = {
            "eventTime": "2025-06-16T13:00:00.000000Z",
            "series": {"count": 4, "lastObservedTime": "2025-06-16T13:59:30.000000Z"},
        }
        assert extract(last_seen.program, event) == "30"

    @freeze_time("2025-06-16T14:00:00Z")
    def test_creation_timestamp_as_last_resort(self, last_seen):
        event = {"metadata": {"creationTimestamp": "2025-06-16T12:00:00Z"}}
        assert extract(last_seen.program, event) == "02:00:00"
