from __future__ import annotations

from typing import List, Optional, Sequence

import streamlit as st

from kubedeck.contexts import ConnectionTarget, ContextNode, NodeType


PROVIDER_ICONS = {"GKE": "🟦", "AWS": "🟧", "Others": "⬜"}


def filter_tree(nodes: Sequence[ContextNode], query: str) -> List[ContextNode]:
    """Keep context nodes whose name or context id contains ``query`` (case-insensitive),
    plus the folders leading to them."""

    q = (query or "").strip().lower()
    if not q:
        return list(nodes)

    out: List[ContextNode] = []
    for node in nodes:
        if node.type == NodeType.CONTEXT:
            target = node.connection_target
            haystack = f"{node.name} {target.id if target else ''}".lower()
            if q in haystack:
                out.append(node)
            continue
        children = filter_tree(node.children, q)
        if children:
            out.append(
                ContextNode(
                    id=node.id,
                    name=node.name,
                    type=node.type,
                    children=tuple(children),
                    parent_id=node.parent_id,
                    is_expanded=True,
                )
            )
    return out


def _render_children(nodes: Sequence[ContextNode], depth: int, selected_id: Optional[str]) -> Optional[ContextNode]:
    clicked: Optional[ContextNode] = None
    indent = "\u2003" * depth
    for node in nodes:
        if node.type == NodeType.FOLDER:
            st.caption(f"{indent}📁 {node.name}")
            hit = _render_children(node.children, depth + 1, selected_id)
            clicked = clicked or hit
            continue
        is_selected = node.connection_target is not None and node.connection_target.id == selected_id
        if st.button(
            f"{indent}☸ {node.name}",
            key=f"ctx_{node.id}",
            type="primary" if is_selected else "secondary",
            use_container_width=True,
            help=node.connection_target.id if node.connection_target else None,
        ):
            clicked = node
    return clicked


def render_context_tree(
    tree: Sequence[ContextNode],
    *,
    selected: Optional[ConnectionTarget] = None,
) -> Optional[ContextNode]:
    """Render the connection tree in the sidebar; returns the clicked context node, if any."""

    query = st.text_input("Filter clusters", value="", key="ctx_filter", placeholder="name or context")
    visible = filter_tree(tree, query)
    if not visible:
        st.info("No contexts match." if tree else "No kube contexts found.")
        return None

    selected_id = selected.id if selected else None
    clicked: Optional[ContextNode] = None
    for root in visible:
        icon = PROVIDER_ICONS.get(root.name, "📁")
        with st.expander(f"{icon} {root.name}", expanded=root.is_expanded or bool(query)):
            hit = _render_children(root.children, 0, selected_id)
            clicked = clicked or hit
    return clicked
