from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple


class NodeType:
    FOLDER = "folder"
    CONTEXT = "context"


@dataclass(frozen=True)
class ConnectionTarget:
    """A reachable cluster endpoint, identified by its raw kubeconfig context name."""

    id: str
    cluster_name: str
    provider: str = "Others"
    region: Optional[str] = None
    # GCP project id or AWS account id
    resource_container_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.cluster_name or self.id


@dataclass(frozen=True)
class ContextNode:
    """A node of the connection tree shown in the sidebar.

    Folder nodes group targets (provider / project / region); context nodes
    wrap exactly one ConnectionTarget. Children reference their parent by id.
    """

    id: str
    name: str
    type: str
    connection_target: Optional[ConnectionTarget] = None
    children: Tuple["ContextNode", ...] = field(default_factory=tuple)
    parent_id: Optional[str] = None
    is_expanded: bool = False

    @property
    def is_context(self) -> bool:
        return self.type == NodeType.CONTEXT and self.connection_target is not None


def context_node_id(context_name: str) -> str:
    return f"context-{context_name}"


def node_for_target(target: ConnectionTarget, *, parent_id: Optional[str] = None) -> ContextNode:
    return ContextNode(
        id=context_node_id(target.id),
        name=target.cluster_name,
        type=NodeType.CONTEXT,
        connection_target=target,
        parent_id=parent_id,
    )


def walk(nodes: Iterable[ContextNode]) -> Iterator[ContextNode]:
    """Depth-first, pre-order walk over a forest of nodes."""

    for node in nodes:
        yield node
        yield from walk(node.children)


def iter_targets(nodes: Iterable[ContextNode]) -> Iterator[ConnectionTarget]:
    for node in walk(nodes):
        if node.is_context:
            yield node.connection_target  # type: ignore[misc]


def find_node(nodes: Iterable[ContextNode], node_id: str) -> Optional[ContextNode]:
    return next((n for n in walk(nodes) if n.id == node_id), None)


def find_target(nodes: Iterable[ContextNode], context_id: str) -> Optional[ConnectionTarget]:
    return next((t for t in iter_targets(nodes) if t.id == context_id), None)


def ancestors(nodes: List[ContextNode], node_id: str) -> List[ContextNode]:
    """Return the folder chain from the root down to (excluding) ``node_id``."""

    by_id = {n.id: n for n in walk(nodes)}
    chain: List[ContextNode] = []
    current = by_id.get(node_id)
    while current is not None and current.parent_id:
        parent = by_id.get(current.parent_id)
        if parent is None:
            break
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain
