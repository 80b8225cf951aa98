from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import streamlit as st

from kubedeck.ui.actions import (
    ACTIVATE,
    CLOSE,
    CLOSE_OTHERS,
    MOVE,
    SHIFT,
    SPLIT_RIGHT,
    TabAction,
)
from kubedeck.ui.resource_view import render_tab_content
from kubedeck.workspace import Panel, Workspace


def _render_tab_strip(panel: Panel, *, panel_is_active: bool) -> Optional[TabAction]:
    action: Optional[TabAction] = None
    for i, tab in enumerate(panel.tabs):
        is_active = tab.context_id == panel.active_context_id
        k = f"strip_{tab.key}_{i}"
        c_label, c_left, c_right, c_close = st.columns([6, 1, 1, 1])
        with c_label:
            if st.button(
                tab.target.display_name,
                key=f"{k}_select",
                type="primary" if is_active and panel_is_active else "secondary",
                use_container_width=True,
                help=tab.context_id,
            ):
                action = TabAction(ACTIVATE, tab)
        with c_left:
            if st.button("◂", key=f"{k}_left", disabled=i == 0, help="Move tab left"):
                action = TabAction(SHIFT, tab, offset=-1)
        with c_right:
            if st.button("▸", key=f"{k}_right", disabled=i == len(panel.tabs) - 1, help="Move tab right"):
                action = TabAction(SHIFT, tab, offset=1)
        with c_close:
            if st.button("✕", key=f"{k}_close", help="Close"):
                action = TabAction(CLOSE, tab)
    return action


def _render_panel_actions(workspace: Workspace, panel: Panel, index: int) -> Optional[TabAction]:
    tab = panel.active_tab
    if tab is None:
        return None

    action: Optional[TabAction] = None
    k = f"panel_{panel.id}"
    a1, a2, a3, a4 = st.columns(4)
    with a1:
        if st.button("Split right", key=f"{k}_split", use_container_width=True):
            action = TabAction(SPLIT_RIGHT, tab)
    with a2:
        if st.button("Close others", key=f"{k}_others", disabled=len(panel.tabs) < 2, use_container_width=True):
            action = TabAction(CLOSE_OTHERS, tab)
    with a3:
        if st.button("⇤ Move", key=f"{k}_move_left", disabled=index == 0, use_container_width=True):
            action = TabAction(MOVE, tab, offset=-1)
    with a4:
        if st.button(
            "Move ⇥",
            key=f"{k}_move_right",
            disabled=index == len(workspace.panels) - 1,
            use_container_width=True,
        ):
            action = TabAction(MOVE, tab, offset=1)
    return action


def render_workspace(
    workspace: Workspace,
    *,
    tab_states: Callable[[str], Dict[str, Any]],
    load_clients: Callable[[str], Any],
    timeout: Optional[int] = None,
) -> Optional[TabAction]:
    """Render every panel side by side; returns the gesture the user made, if any."""

    action: Optional[TabAction] = None
    columns = st.columns(len(workspace.panels))
    for index, (column, panel) in enumerate(zip(columns, workspace.panels)):
        panel_is_active = panel.id == workspace.active_panel_id
        with column:
            css = "kd-panel kd-panel-active" if panel_is_active else "kd-panel"
            st.markdown(f"<div class='{css}'>", unsafe_allow_html=True)
            if panel.is_empty:
                st.markdown(
                    "<div class='kd-empty'>Select a cluster in the sidebar to open it here.</div>",
                    unsafe_allow_html=True,
                )
            else:
                action = _render_tab_strip(panel, panel_is_active=panel_is_active) or action
                action = _render_panel_actions(workspace, panel, index) or action
                tab = panel.active_tab
                if tab is not None:
                    st.divider()
                    render_tab_content(tab, tab_states(tab.key), load_clients=load_clients, timeout=timeout)
            st.markdown("</div>", unsafe_allow_html=True)
    return action
