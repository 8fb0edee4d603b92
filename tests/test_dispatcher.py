import typing

import pytest
import pytest_asyncio

from KubeStatus.actions.dispatcher import DEFAULT_ACTIONS
from KubeStatus.actions.exec_action import ProviderId, parse_provider_id
from KubeStatus.actions.pod_action_utils import get_container_names
from KubeStatus.actions.view_logs_action import parse_tail_lines
from KubeStatus.core.contexts import ActionContext
from KubeStatus.core.exceptions import ActionFailedError, KubectlError, TerminalLaunchError

from factories import make_list, make_node, make_pod


async def _load(session, kubectl, *documents, kind="pod", namespace="prod"):
    kubectl.queue(make_list(*documents))
    await session.refresh(kind=kind, namespace=namespace)
    kubectl.calls.clear()


class TestGating:
    @pytest.mark.asyncio
    async def test_no_object_selected(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl)
        assert not await dispatcher.dispatch("delete", 0)
        assert ui.messages("warning") == ["No object selected."]
        assert kubectl.calls == []

    @pytest.mark.asyncio
    async def test_row_index_out_of_range(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod())
        assert not await dispatcher.dispatch("view-details", 5)
        assert not await dispatcher.dispatch("view-details", None)
        assert ui.detail_views == []

    @pytest.mark.asyncio
    async def test_unknown_action(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod())
        assert not await dispatcher.dispatch("scale", 0)
        assert "Unknown action 'scale'." in ui.messages("error")

    @pytest.mark.asyncio
    async def test_delete_rejected_for_componentstatus(self, dispatcher, session, kubectl, ui):
        component = {
            "kind": "ComponentStatus",
            "metadata": {"name": "etcd-0"},
            "conditions": [{"type": "Healthy", "status": "True"}],
        }
        await _load(session, kubectl, component, kind="componentstatus")
        assert not await dispatcher.dispatch("delete", 0)
        assert kubectl.calls == []
        assert ui.confirmations == []
        assert ui.messages("warning") == ["'delete' is not supported for componentstatus."]

    @pytest.mark.asyncio
    async def test_logs_rejected_for_services(self, dispatcher, session, kubectl, ui):
        service = {"kind": "Service", "metadata": {"name": "api", "namespace": "prod"}}
        await _load(session, kubectl, service, kind="service")
        assert not await dispatcher.dispatch("show-logs", 0)
        assert ui.stream_views == []

    @pytest.mark.asyncio
    async def test_kind_comes_from_the_selected_object(self, dispatcher, session, kubectl, ui, terminal):
        # A pod listed while the session shows another kind is still handled as a pod.
        await _load(session, kubectl, make_pod(name="stray"), kind="deployment")
        assert await dispatcher.dispatch("exec", 0)
        assert terminal.launched[0][1] == "exec:stray/app"


class TestDelete:
    @pytest_asyncio.fixture
    async def loaded(self, session, kubectl):
        await _load(session, kubectl, make_pod(name="web-0"), make_pod(name="web-1"))
        return session

    @pytest.mark.asyncio
    async def test_confirmed_delete_runs_and_refreshes(self, dispatcher, loaded, kubectl, ui):
        kubectl.queue('pod "web-0" deleted\n', make_list(make_pod(name="web-1")))
        assert await dispatcher.dispatch("delete", 0)
        assert kubectl.calls == [
            ["delete", "--namespace", "prod", "pod/web-0"],
            ["get", "pod", "-o", "json", "--namespace", "prod"],
        ]
        assert ui.confirmations == ["Are you sure you want to delete pod/web-0 in namespace 'prod'?"]
        assert 'pod "web-0" deleted' in ui.messages("information")
        assert [row.source.name for row in loaded.rendered.rows] == ["web-1"]

    @pytest.mark.asyncio
    async def test_cancelled_delete_issues_no_command(self, dispatcher, loaded, kubectl, ui):
        ui.confirm_answer = False
        assert not await dispatcher.dispatch("delete", 1)
        assert kubectl.calls == []
        assert ui.messages("information") == ["Delete action cancelled."]

    @pytest.mark.asyncio
    async def test_failed_delete_reports_command_and_does_not_refresh(
        self, dispatcher, loaded, kubectl, ui
    ):
        argv = ["kubectl", "delete", "--namespace", "prod", "pod/web-0"]
        kubectl.queue(KubectlError(argv, 1, 'Error from server (Forbidden): pods "web-0" is forbidden'))
        rendered = loaded.rendered
        assert not await dispatcher.dispatch("delete", 0)
        assert len(kubectl.calls) == 1
        assert loaded.rendered is rendered
        [error] = ui.messages("error")
        assert "kubectl delete --namespace prod pod/web-0" in error
        assert "Forbidden" in error


class TestViewDetails:
    @pytest.mark.asyncio
    async def test_opens_yaml_view(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod(name="web-0"))
        assert await dispatcher.dispatch("view-details", 0)
        assert ui.detail_views == [
            ("prod/pod/web-0", ["get", "--namespace", "prod", "pod/web-0", "-o", "yaml"])
        ]
        # The command itself runs inside the view.
        assert kubectl.calls == []

    @pytest.mark.asyncio
    async def test_cluster_scoped_view(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_node(), kind="node")
        assert await dispatcher.dispatch("view-details", 0)
        assert ui.detail_views == [("node/node-a", ["get", "node/node-a", "-o", "yaml"])]


class TestLogs:
    @pytest.mark.asyncio
    async def test_single_container_is_selected_automatically(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod(name="web-0"))
        assert await dispatcher.dispatch("show-logs", 0)
        assert ui.choices == []
        assert ui.prompts[0][2] == "1000"
        assert ui.stream_views == [
            (
                "Logs: web-0/app",
                ["logs", "--namespace", "prod", "-c", "app", "--tail", "1000", "web-0"],
            )
        ]

    @pytest.mark.asyncio
    async def test_several_containers_prompt_a_choice(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod(name="web-0", containers=("app", "sidecar")))
        ui.choice_answer = "sidecar"
        ui.prompt_answer = "50"
        assert await dispatcher.dispatch("show-logs", 0)
        assert ui.choices == [("Select a container in web-0", ["app", "sidecar"], "app")]
        assert ui.stream_views[0][1] == [
            "logs",
            "--namespace",
            "prod",
            "-c",
            "sidecar",
            "--tail",
            "50",
            "web-0",
        ]

    @pytest.mark.asyncio
    async def test_stream_logs_follows_with_short_tail(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod(name="web-0"))
        assert await dispatcher.dispatch("stream-logs", 0)
        assert ui.prompts == []
        assert ui.stream_views[0][1] == [
            "logs",
            "--namespace",
            "prod",
            "-c",
            "app",
            "--tail",
            "10",
            "-f",
            "web-0",
        ]

    @pytest.mark.asyncio
    async def test_cancelled_container_choice(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod(containers=("a", "b")))
        ui.choice_answer = None
        assert not await dispatcher.dispatch("stream-logs", 0)
        assert ui.stream_views == []
        assert ui.messages("information") == ["Container selection cancelled."]

    @pytest.mark.asyncio
    async def test_cancelled_tail_prompt(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod())
        ui.accept_default = False
        assert not await dispatcher.dispatch("show-logs", 0)
        assert ui.stream_views == []

    @pytest.mark.asyncio
    async def test_invalid_tail_is_an_error(self, dispatcher, session, kubectl, ui):
        await _load(session, kubectl, make_pod())
        ui.prompt_answer = "many"
        assert not await dispatcher.dispatch("show-logs", 0)
        assert ui.stream_views == []
        assert ui.messages("error") == ["Tail lines must be a positive number, got 'many'."]


class TestExec:
    @pytest.mark.asyncio
    async def test_exec_into_pod(self, dispatcher, session, kubectl, ui, terminal):
        await _load(session, kubectl, make_pod(name="web-0"))
        assert await dispatcher.dispatch("exec", 0)
        assert terminal.launched == [
            (
                ["kubectl", "exec", "-it", "--namespace", "prod", "-c", "app", "web-0", "sh"],
                "exec:web-0/app",
            )
        ]

    @pytest.mark.asyncio
    async def test_exec_uses_global_kubectl_flags(self, dispatcher, session, kubectl, terminal):
        kubectl.context = "staging"
        await _load(session, kubectl, make_pod(name="web-0"))
        assert await dispatcher.dispatch("exec", 0)
        assert terminal.launched[0][0][:3] == ["kubectl", "--context", "staging"]

    @pytest.mark.asyncio
    async def test_ssh_into_node(self, dispatcher, session, kubectl, terminal):
        await _load(session, kubectl, make_node(), kind="node")
        assert await dispatcher.dispatch("exec", 0)
        assert terminal.launched == [
            (["gcloud", "compute", "ssh", "--zone", "us-central1-a", "node-a"], "ssh:node-a")
        ]

    @pytest.mark.asyncio
    async def test_node_without_gce_provider(self, dispatcher, session, kubectl, ui, terminal):
        await _load(session, kubectl, make_node(provider_id="aws:///us-east-1a/i-123"), kind="node")
        assert not await dispatcher.dispatch("exec", 0)
        assert terminal.launched == []
        [error] = ui.messages("error")
        assert "aws:///us-east-1a/i-123" in error

    @pytest.mark.asyncio
    async def test_terminal_failure_is_reported(self, dispatcher, session, kubectl, ui, terminal):
        async def fail(argv, window_name):
            raise TerminalLaunchError("No tmux session 'KubeStatus' found")

        terminal.launch_command_in_new_window = fail
        await _load(session, kubectl, make_pod())
        assert not await dispatcher.dispatch("exec", 0)
        assert ui.messages("error") == ["No tmux session 'KubeStatus' found"]


class TestHelpers:
    def test_parse_provider_id(self):
        assert parse_provider_id("gce://my-proj/europe-west1-b/gke-pool-1-abc") == ProviderId(
            project="my-proj", zone="europe-west1-b", host="gke-pool-1-abc"
        )

    @pytest.mark.parametrize(
        "value", [None, "", "gce://proj/zone", "aws:///us-east-1a/i-1", "gce://a/b/c/d"]
    )
    def test_unparsable_provider_ids(self, value):
        assert parse_provider_id(value) is None

    def test_container_names_fall_back_to_pod_containers(self):
        pod = make_pod(containers=("init", "app"), with_status=False)
        assert get_container_names(pod) == ["init", "app"]

    def test_container_names_prefer_status(self):
        pod = make_pod(containers=("app",))
        pod["spec"]["containers"].append({"name": "not-started"})
        assert get_container_names(pod) == ["app"]

    def test_pod_without_containers(self):
        assert get_container_names({"kind": "Pod"}) == []

    @pytest.mark.parametrize("value, expected", [("10", 10), (" 200 ", 200)])
    def test_parse_tail_lines(self, value, expected):
        assert parse_tail_lines(value) == expected

    @pytest.mark.parametrize("value", ["0", "-5", "abc", ""])
    def test_parse_tail_lines_rejects(self, value):
        with pytest.raises(ActionFailedError):
            parse_tail_lines(value)

    @pytest.mark.parametrize("action_class", DEFAULT_ACTIONS, ids=lambda cls: cls.name)
    def test_actions_take_an_action_context(self, action_class):
        hints = typing.get_type_hints(action_class.__init__)
        assert hints["context"] is ActionContext
