from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from kubedeck.contexts.tree import ConnectionTarget, ContextNode, NodeType, context_node_id


@dataclass(frozen=True)
class ParsedContext:
    provider: str
    cluster: str
    # Folder names between the provider root and the cluster leaf.
    folders: Tuple[str, ...] = ()
    region: Optional[str] = None
    resource_container_id: Optional[str] = None


@dataclass(frozen=True)
class ContextProvider:
    """Classifies raw kubeconfig context names for one cloud provider."""

    name: str
    pattern: "re.Pattern[str]"
    expanded: bool = False

    def matches(self, context: str) -> bool:
        return bool(self.pattern.match(context))

    def parse(self, context: str) -> Optional[ParsedContext]:
        match = self.pattern.match(context)
        if not match:
            return None
        return self._parse_match(context, match)

    def _parse_match(self, context: str, match: "re.Match[str]") -> ParsedContext:
        return ParsedContext(provider=self.name, cluster=context)

    def target_for(self, context: str) -> Optional[ConnectionTarget]:
        parsed = self.parse(context)
        if parsed is None:
            return None
        return ConnectionTarget(
            id=context,
            cluster_name=parsed.cluster,
            provider=parsed.provider,
            region=parsed.region,
            resource_container_id=parsed.resource_container_id,
        )

    def build_tree(self, contexts: Sequence[str], root_id: str) -> ContextNode:
        """Build ``<provider> / <folders...> / <cluster>`` for the given contexts.

        Folder nodes are created on first use and keep insertion order.
        """

        # Mutable scratch structure: folder id -> (name, parent id, child ids)
        folders: Dict[str, Tuple[str, Optional[str], List[str]]] = {root_id: (self.name, None, [])}
        leaves: Dict[str, ContextNode] = {}

        for context in contexts:
            parsed = self.parse(context)
            if parsed is None:
                continue
            parent_id = root_id
            for folder in parsed.folders:
                folder_id = f"{parent_id}-{folder}"
                if folder_id not in folders:
                    folders[folder_id] = (folder, parent_id, [])
                    folders[parent_id][2].append(folder_id)
                parent_id = folder_id

            target = self.target_for(context)
            leaf = ContextNode(
                id=context_node_id(context),
                name=parsed.cluster,
                type=NodeType.CONTEXT,
                connection_target=target,
                parent_id=parent_id,
            )
            leaves[leaf.id] = leaf
            folders[parent_id][2].append(leaf.id)

        def _freeze(folder_id: str) -> ContextNode:
            name, parent_id, child_ids = folders[folder_id]
            children = tuple(leaves[c] if c in leaves else _freeze(c) for c in child_ids)
            return ContextNode(
                id=folder_id,
                name=name,
                type=NodeType.FOLDER,
                children=children,
                parent_id=parent_id,
                is_expanded=self.expanded if folder_id == root_id else False,
            )

        return _freeze(root_id)


class GKEProvider(ContextProvider):
    """Context format: ``gke_<project>_<region>_<cluster>``."""

    def _parse_match(self, context: str, match: "re.Match[str]") -> ParsedContext:
        project, region, cluster = match.group(1), match.group(2), match.group(3)
        return ParsedContext(
            provider=self.name,
            cluster=cluster,
            folders=(project, region),
            region=region,
            resource_container_id=project,
        )


class EKSProvider(ContextProvider):
    """Context format: ``arn:aws:eks:<region>:<account>:cluster/<cluster>``."""

    def _parse_match(self, context: str, match: "re.Match[str]") -> ParsedContext:
        region, account, cluster = match.group(1), match.group(2), match.group(3)
        return ParsedContext(
            provider=self.name,
            cluster=cluster,
            folders=(account, region),
            region=region,
            resource_container_id=account,
        )


GKE = GKEProvider(name="GKE", pattern=re.compile(r"^gke_([^_]+)_([^_]+)_(.+)$"))
EKS = EKSProvider(name="AWS", pattern=re.compile(r"^arn:aws:eks:([^:]+):(\d+):cluster/(.+)$"))
# Catch-all: must stay last.
OTHERS = ContextProvider(name="Others", pattern=re.compile(r"^.+$"), expanded=True)

DEFAULT_PROVIDERS: Tuple[ContextProvider, ...] = (GKE, EKS, OTHERS)


def classify(context: str, providers: Sequence[ContextProvider] = DEFAULT_PROVIDERS) -> Optional[ContextProvider]:
    return next((p for p in providers if p.matches(context)), None)


def group_contexts_by_provider(
    contexts: Sequence[str],
    providers: Sequence[ContextProvider] = DEFAULT_PROVIDERS,
) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {p.name: [] for p in providers}
    for context in contexts:
        provider = classify(context, providers)
        if provider is not None:
            grouped[provider.name].append(context)
    return grouped


def build_tree_from_contexts(
    contexts: Sequence[str],
    providers: Sequence[ContextProvider] = DEFAULT_PROVIDERS,
) -> List[ContextNode]:
    """One root folder per provider that received at least one context."""

    grouped = group_contexts_by_provider(contexts, providers)
    tree: List[ContextNode] = []
    for provider in providers:
        provider_contexts = grouped[provider.name]
        if not provider_contexts:
            continue
        tree.append(provider.build_tree(provider_contexts, f"folder-{provider.name.lower()}"))
    return tree


def target_for_context(context: str, providers: Sequence[ContextProvider] = DEFAULT_PROVIDERS) -> ConnectionTarget:
    provider = classify(context, providers)
    target = provider.target_for(context) if provider is not None else None
    return target or ConnectionTarget(id=context, cluster_name=context)
