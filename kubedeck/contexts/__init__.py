"""Connection-target tree built from kubeconfig contexts.

- `tree`: ConnectionTarget / ContextNode records and tree walking
- `providers`: GKE / AWS / Others classification and tree building
- `kubeconfig`: context discovery through the kubernetes client
"""

from .kubeconfig import KubeconfigError, KubeContexts, list_kube_contexts
from .providers import (
    DEFAULT_PROVIDERS,
    EKS,
    GKE,
    OTHERS,
    ContextProvider,
    build_tree_from_contexts,
    classify,
    group_contexts_by_provider,
    target_for_context,
)
from .tree import (
    ConnectionTarget,
    ContextNode,
    NodeType,
    ancestors,
    find_node,
    find_target,
    iter_targets,
    node_for_target,
    walk,
)

__all__ = [
    "ConnectionTarget",
    "ContextNode",
    "ContextProvider",
    "DEFAULT_PROVIDERS",
    "EKS",
    "GKE",
    "KubeContexts",
    "KubeconfigError",
    "NodeType",
    "OTHERS",
    "ancestors",
    "build_tree_from_contexts",
    "classify",
    "find_node",
    "find_target",
    "group_contexts_by_provider",
    "iter_targets",
    "list_kube_contexts",
    "node_for_target",
    "target_for_context",
    "walk",
]
