"""Resource listers for one cluster.

Every lister returns ``{"ok": True, <key>: [row, ...]}`` or an error dict
``{"ok": False, "error": ...}``; API errors never reach the UI as exceptions.
Rows are flat dicts ready for a DataFrame.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

import yaml
from kubernetes.client import ApiException


logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Result = Dict[str, Any]


def _iso(ts: Any) -> Optional[str]:
    return ts.isoformat() if ts else None


def _error(exc: Exception) -> Result:
    if isinstance(exc, ApiException):
        return {"ok": False, "error": f"{exc.status} {exc.reason}".strip(), "status": exc.status}
    return {"ok": False, "error": str(exc)}


def _list_items(api: Any, namespaced: str, cluster_wide: str, namespace: Optional[str], timeout: Optional[int]):
    """Call ``api.<namespaced>(namespace=...)`` or ``api.<cluster_wide>()`` and return ``.items``."""

    if namespace:
        return getattr(api, namespaced)(namespace=namespace, _request_timeout=timeout).items
    return getattr(api, cluster_wide)(_request_timeout=timeout).items


def _collect(key: str, load: Callable[[], List[Any]], to_row: Callable[[Any], Row]) -> Result:
    try:
        items = load()
    except ApiException as exc:
        logger.info("Listing %s failed: %s %s", key, exc.status, exc.reason)
        return _error(exc)
    return {"ok": True, key: [to_row(item) for item in items]}


# ---------------------------------------------------------------------------
# Row shapes
# ---------------------------------------------------------------------------


def _namespace_row(ns: Any) -> Row:
    meta = ns.metadata
    return {
        "name": meta.name,
        "status": getattr(ns.status, "phase", None),
        "labels": meta.labels or {},
        "creationTimestamp": _iso(meta.creation_timestamp),
    }


def _node_row(node: Any) -> Row:
    status = node.status
    ready = next((c.status for c in status.conditions or [] if c.type == "Ready"), "Unknown")
    return {
        "name": node.metadata.name,
        "ready": ready,
        "kubeletVersion": getattr(getattr(status, "node_info", None), "kubelet_version", None),
        "capacity": status.capacity or {},
        "labels": node.metadata.labels or {},
        "creationTimestamp": _iso(node.metadata.creation_timestamp),
    }


def _pod_row(pod: Any) -> Row:
    status = pod.status
    containers = getattr(status, "container_statuses", None) or []
    declared = len(getattr(pod.spec, "containers", None) or [])
    ready = sum(1 for c in containers if getattr(c, "ready", False))
    return {
        "name": pod.metadata.name,
        "namespace": pod.metadata.namespace,
        "phase": getattr(status, "phase", None),
        "node": getattr(pod.spec, "node_name", None),
        "podIP": getattr(status, "pod_ip", None),
        "startTime": _iso(getattr(status, "start_time", None)),
        "ready": f"{ready}/{declared}",
        "restarts": sum(int(getattr(c, "restart_count", 0) or 0) for c in containers),
    }


def _deployment_row(deploy: Any) -> Row:
    status = deploy.status
    return {
        "name": deploy.metadata.name,
        "namespace": deploy.metadata.namespace,
        "replicas": getattr(deploy.spec, "replicas", None) or 0,
        "readyReplicas": getattr(status, "ready_replicas", None) or 0,
        "updatedReplicas": getattr(status, "updated_replicas", None) or 0,
        "availableReplicas": getattr(status, "available_replicas", None) or 0,
        "creationTimestamp": _iso(deploy.metadata.creation_timestamp),
    }


def _port(port: Any) -> Row:
    return {
        "name": getattr(port, "name", None),
        "port": getattr(port, "port", None),
        "targetPort": getattr(port, "target_port", None),
        "protocol": getattr(port, "protocol", None),
    }


def _service_row(svc: Any) -> Row:
    spec = svc.spec
    return {
        "name": svc.metadata.name,
        "namespace": svc.metadata.namespace,
        "type": getattr(spec, "type", None),
        "clusterIP": getattr(spec, "cluster_ip", None),
        "ports": [_port(p) for p in getattr(spec, "ports", None) or []],
    }


def _event_row(event: Any) -> Row:
    involved = event.involved_object
    return {
        "namespace": event.metadata.namespace,
        "type": getattr(event, "type", None),
        "reason": getattr(event, "reason", None),
        "message": getattr(event, "message", None),
        "count": getattr(event, "count", None),
        "firstTimestamp": _iso(event.first_timestamp),
        "lastTimestamp": _iso(event.last_timestamp),
        "involvedObject": f"{getattr(involved, 'kind', '')}/{getattr(involved, 'name', '')}",
    }


# ---------------------------------------------------------------------------
# Listers
# ---------------------------------------------------------------------------


def list_namespaces(core_api: Any, *, timeout: Optional[int] = None) -> Result:
    return _collect("namespaces", lambda: core_api.list_namespace(_request_timeout=timeout).items, _namespace_row)


def list_nodes(core_api: Any, *, timeout: Optional[int] = None) -> Result:
    return _collect("nodes", lambda: core_api.list_node(_request_timeout=timeout).items, _node_row)


def list_pods(core_api: Any, namespace: Optional[str] = None, *, timeout: Optional[int] = None) -> Result:
    return _collect(
        "pods",
        lambda: _list_items(core_api, "list_namespaced_pod", "list_pod_for_all_namespaces", namespace, timeout),
        _pod_row,
    )


def list_deployments(apps_api: Any, namespace: Optional[str] = None, *, timeout: Optional[int] = None) -> Result:
    return _collect(
        "deployments",
        lambda: _list_items(
            apps_api, "list_namespaced_deployment", "list_deployment_for_all_namespaces", namespace, timeout
        ),
        _deployment_row,
    )


def list_services(core_api: Any, namespace: Optional[str] = None, *, timeout: Optional[int] = None) -> Result:
    return _collect(
        "services",
        lambda: _list_items(core_api, "list_namespaced_service", "list_service_for_all_namespaces", namespace, timeout),
        _service_row,
    )


def list_events(
    core_api: Any,
    namespace: Optional[str] = None,
    limit: int = 200,
    *,
    timeout: Optional[int] = None,
) -> Result:
    """Events newest first (by last, else first, timestamp), at most ``limit``."""

    result = _collect(
        "events",
        lambda: _list_items(core_api, "list_namespaced_event", "list_event_for_all_namespaces", namespace, timeout),
        _event_row,
    )
    if result["ok"]:
        events = sorted(
            result["events"],
            key=lambda ev: ev.get("lastTimestamp") or ev.get("firstTimestamp") or "",
            reverse=True,
        )
        result["events"] = events[: max(0, int(limit))]
    return result


# Kind shown in the tab -> api attribute on the client set, lister, result key, namespaced
RESOURCE_KINDS: Dict[str, Dict[str, Any]] = {
    "Pods": {"api": "core", "fn": list_pods, "key": "pods", "namespaced": True},
    "Deployments": {"api": "apps", "fn": list_deployments, "key": "deployments", "namespaced": True},
    "Services": {"api": "core", "fn": list_services, "key": "services", "namespaced": True},
    "Events": {"api": "core", "fn": list_events, "key": "events", "namespaced": True},
    "Nodes": {"api": "core", "fn": list_nodes, "key": "nodes", "namespaced": False},
    "Namespaces": {"api": "core", "fn": list_namespaces, "key": "namespaces", "namespaced": False},
}


def fetch_kind(
    clients: Any,
    kind: str,
    namespace: Optional[str] = None,
    *,
    timeout: Optional[int] = None,
) -> Result:
    """List one resource kind through a ``KubernetesClientSet``; never raises for API errors."""

    entry = RESOURCE_KINDS.get(kind)
    if entry is None:
        return {"ok": False, "error": f"Unknown resource kind: {kind}"}

    api = getattr(clients, entry["api"])
    lister: Callable[..., Result] = entry["fn"]
    try:
        if entry["namespaced"]:
            return lister(api, namespace or None, timeout=timeout)
        return lister(api, timeout=timeout)
    except Exception as exc:  # noqa: BLE001
        # urllib3 timeouts / connection errors from an unreachable cluster
        logger.warning("Fetching %s failed: %s", kind, exc)
        return _error(exc)


def rows_of(result: Any, kind: str) -> List[Row]:
    entry = RESOURCE_KINDS.get(kind)
    if entry is None or not isinstance(result, dict) or not result.get("ok"):
        return []
    value = result.get(entry["key"])
    return value if isinstance(value, list) else []


def to_json_text(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def to_yaml_text(value: Any) -> str:
    return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
