import logging
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

from kubedeck.config import DashboardConfig
from kubedeck.contexts import ContextNode, KubeconfigError, build_tree_from_contexts, list_kube_contexts
from kubedeck.kube.clients import load_clients
from kubedeck.log import configure_logging
from kubedeck.preferences import Preferences, load_preferences
from kubedeck.theme import set_theme
from kubedeck.ui.actions import apply_action
from kubedeck.ui.context_sidebar import render_context_tree
from kubedeck.ui.state import carry_tab_state, get_workspace, set_workspace, tab_state
from kubedeck.ui.workspace_view import render_workspace
from kubedeck.workspace import select_connection_target


PAGE_TITLE = "Workspace"

logger = logging.getLogger("kubedeck.pages.workspace")


def _load_config() -> Tuple[DashboardConfig, Preferences]:
    cfg = DashboardConfig.from_env()
    prefs = load_preferences(path=cfg.preferences_path)
    return cfg.with_preferences(prefs), prefs


def _load_tree(kubeconfig: Optional[str], force_reload: bool = False) -> Tuple[List[ContextNode], Optional[str]]:
    """Build the connection tree and keep it in session_state until reloaded."""

    sig = kubeconfig or ""
    if force_reload or st.session_state.get("_ctx_tree_sig") != sig or "_ctx_tree" not in st.session_state:
        try:
            contexts = list_kube_contexts(kubeconfig)
            st.session_state["_ctx_tree"] = build_tree_from_contexts(contexts.names)
            st.session_state["_ctx_tree_error"] = None
        except KubeconfigError as exc:
            logger.warning("Could not read kubeconfig: %s", exc)
            st.session_state["_ctx_tree"] = []
            st.session_state["_ctx_tree_error"] = str(exc)
        st.session_state["_ctx_tree_sig"] = sig
    return st.session_state["_ctx_tree"], st.session_state.get("_ctx_tree_error")


def _client_loader(kubeconfig: Optional[str]):
    """Per-context API clients, cached in session_state (clients are not pickle-safe)."""

    cache: Dict[Tuple[str, str], Any] = st.session_state.setdefault("_k8s_clients", {})

    def _load(context: str):
        key = (kubeconfig or "", context)
        if key not in cache:
            cache[key] = load_clients(context, kubeconfig=kubeconfig)
        return cache[key]

    return _load


def main() -> None:
    cfg, prefs = _load_config()
    configure_logging(cfg.log_level)
    set_theme(PAGE_TITLE, mode=prefs.general.theme)

    workspace = get_workspace(st.session_state, history_limit=cfg.tab_history_max)

    with st.sidebar:
        st.markdown("<div class='kd-section-title'>Clusters</div>", unsafe_allow_html=True)
        reload_tree = st.button("Reload contexts", use_container_width=True)
        tree, error = _load_tree(cfg.kubeconfig, force_reload=reload_tree)
        if error:
            st.error(error)
        clicked = render_context_tree(tree, selected=workspace.selected_context)

    if clicked is not None:
        set_workspace(st.session_state, select_connection_target(workspace, clicked))
        st.rerun()

    action = render_workspace(
        workspace,
        tab_states=lambda key: tab_state(st.session_state, key),
        load_clients=_client_loader(cfg.kubeconfig),
        timeout=cfg.fetch_timeout_sec,
    )
    if action is None:
        return

    outcome = apply_action(workspace, action, max_panels=cfg.max_panels)
    if outcome.message:
        st.toast(outcome.message)
    if outcome.workspace is workspace:
        return
    if outcome.moved is not None:
        carry_tab_state(st.session_state, outcome.moved, old_panel_id=action.tab.panel_id)
    set_workspace(st.session_state, outcome.workspace)
    st.rerun()


main()
