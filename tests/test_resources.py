from datetime import datetime, timezone
from types import SimpleNamespace

import yaml
from kubernetes.client import ApiException

from kubedeck.kube.resources import (
    RESOURCE_KINDS,
    fetch_kind,
    list_events,
    list_nodes,
    list_pods,
    rows_of,
    to_json_text,
    to_yaml_text,
)


def _meta(name, namespace=None, ts=None):
    return SimpleNamespace(name=name, namespace=namespace, labels=None, creation_timestamp=ts)


def _pod(name, phase="Running", restarts=(0,), ready=(True,)):
    statuses = [SimpleNamespace(restart_count=r, ready=ok) for r, ok in zip(restarts, ready)]
    return SimpleNamespace(
        metadata=_meta(name, "default"),
        spec=SimpleNamespace(node_name="node-a", containers=[object()] * len(statuses)),
        status=SimpleNamespace(phase=phase, pod_ip="10.1.0.4", start_time=None, container_statuses=statuses),
    )


class FakeCoreApi:
    def __init__(self, pods=(), nodes=(), events=(), error=None):
        self.pods = list(pods)
        self.nodes = list(nodes)
        self.events = list(events)
        self.error = error
        self.calls = []

    def _items(self, name, items, **kwargs):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(items=items)

    def list_namespaced_pod(self, **kwargs):
        return self._items("list_namespaced_pod", self.pods, **kwargs)

    def list_pod_for_all_namespaces(self, **kwargs):
        return self._items("list_pod_for_all_namespaces", self.pods, **kwargs)

    def list_node(self, **kwargs):
        return self._items("list_node", self.nodes, **kwargs)

    def list_event_for_all_namespaces(self, **kwargs):
        return self._items("list_event_for_all_namespaces", self.events, **kwargs)


def test_list_pods_summarizes_containers_and_passes_timeout():
    core = FakeCoreApi(pods=[_pod("web", restarts=(1, 2), ready=(True, False))])

    result = list_pods(core, "default", timeout=7)

    assert result["ok"] is True
    assert result["pods"] == [
        {
            "name": "web",
            "namespace": "default",
            "phase": "Running",
            "node": "node-a",
            "podIP": "10.1.0.4",
            "startTime": None,
            "ready": "1/2",
            "restarts": 3,
        }
    ]
    assert core.calls == [("list_namespaced_pod", {"namespace": "default", "_request_timeout": 7})]


def test_list_pods_all_namespaces_without_namespace():
    core = FakeCoreApi(pods=[])
    assert list_pods(core) == {"ok": True, "pods": []}
    assert core.calls[0][0] == "list_pod_for_all_namespaces"


def test_api_errors_become_error_dicts():
    core = FakeCoreApi(error=ApiException(status=403, reason="Forbidden"))

    result = list_pods(core)

    assert result == {"ok": False, "error": "403 Forbidden", "status": 403}


def test_list_nodes_reports_ready_condition():
    node = SimpleNamespace(
        metadata=_meta("node-a"),
        status=SimpleNamespace(
            conditions=[SimpleNamespace(type="MemoryPressure", status="False"), SimpleNamespace(type="Ready", status="True")],
            node_info=SimpleNamespace(kubelet_version="v1.29.1"),
            capacity={"cpu": "4"},
        ),
    )
    result = list_nodes(FakeCoreApi(nodes=[node]))
    assert result["nodes"][0]["ready"] == "True"
    assert result["nodes"][0]["kubeletVersion"] == "v1.29.1"


def test_list_events_newest_first_and_limited():
    def event(reason, minute):
        ts = datetime(2024, 1, 1, 12, minute, tzinfo=timezone.utc)
        return SimpleNamespace(
            metadata=_meta(f"ev-{reason}", "default"),
            type="Warning",
            reason=reason,
            message="",
            count=1,
            first_timestamp=ts,
            last_timestamp=ts,
            involved_object=SimpleNamespace(kind="Pod", name="web"),
        )

    core = FakeCoreApi(events=[event("Old", 1), event("New", 30), event("Mid", 10)])

    result = list_events(core, limit=2)

    assert [e["reason"] for e in result["events"]] == ["New", "Mid"]
    assert result["events"][0]["involvedObject"] == "Pod/web"


def test_fetch_kind_dispatches_to_the_right_api():
    clients = SimpleNamespace(context="kind-dev", core=FakeCoreApi(pods=[_pod("api")]), apps=None)

    result = fetch_kind(clients, "Pods", "default", timeout=3)

    assert rows_of(result, "Pods")[0]["name"] == "api"
    assert clients.core.calls[0] == ("list_namespaced_pod", {"namespace": "default", "_request_timeout": 3})


def test_fetch_kind_cluster_scoped_ignores_namespace():
    clients = SimpleNamespace(context="kind-dev", core=FakeCoreApi(nodes=[]), apps=None)
    assert fetch_kind(clients, "Nodes", "default") == {"ok": True, "nodes": []}


def test_fetch_kind_unknown_kind():
    result = fetch_kind(SimpleNamespace(), "CronJobs")
    assert result["ok"] is False
    assert "CronJobs" in result["error"]


def test_fetch_kind_converts_transport_errors():
    clients = SimpleNamespace(context="x", core=FakeCoreApi(error=ConnectionError("connection refused")), apps=None)
    assert fetch_kind(clients, "Pods") == {"ok": False, "error": "connection refused"}


def test_rows_of_ignores_failures_and_unknown_kinds():
    assert rows_of({"ok": False, "error": "boom"}, "Pods") == []
    assert rows_of({"ok": True, "pods": [{"name": "a"}]}, "Deployments") == []
    assert rows_of(None, "Pods") == []
    assert set(RESOURCE_KINDS) == {"Pods", "Deployments", "Services", "Events", "Nodes", "Namespaces"}


def test_text_renderings():
    value = {"name": "web", "ports": [{"port": 80}]}
    assert yaml.safe_load(to_yaml_text(value)) == value
    assert to_json_text(value).startswith('{\n  "name": "web"')
