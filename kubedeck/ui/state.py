"""Session-state glue between Streamlit and the workspace value.

Every helper takes the state mapping explicitly (``st.session_state`` on the
pages, a plain dict in tests).
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, MutableMapping

from kubedeck.workspace import MoveResult, Workspace, composite_key, new_workspace


logger = logging.getLogger(__name__)

WORKSPACE_KEY = "workspace"
TAB_STATE_KEY = "tab_state"


def get_workspace(state: MutableMapping[str, Any], *, history_limit: int = 100) -> Workspace:
    ws = state.get(WORKSPACE_KEY)
    if not isinstance(ws, Workspace):
        ws = new_workspace(history_limit=history_limit)
        state[WORKSPACE_KEY] = ws
    elif ws.history_limit != history_limit:
        ws = replace(ws, tab_history=ws.tab_history[-history_limit:], history_limit=history_limit)
        state[WORKSPACE_KEY] = ws
    return ws


def set_workspace(state: MutableMapping[str, Any], workspace: Workspace) -> None:
    state[WORKSPACE_KEY] = workspace
    prune_tab_state(state, workspace)


def _tab_states(state: MutableMapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    store = state.get(TAB_STATE_KEY)
    if not isinstance(store, dict):
        store = {}
        state[TAB_STATE_KEY] = store
    return store


def tab_state(state: MutableMapping[str, Any], key: str) -> Dict[str, Any]:
    """Per-tab UI state (selected kind, namespace, cached rows) keyed by composite key."""

    return _tab_states(state).setdefault(key, {})


def prune_tab_state(state: MutableMapping[str, Any], workspace: Workspace) -> None:
    live = {t.key for t in workspace.iter_tabs()}
    store = _tab_states(state)
    for key in [k for k in store if k not in live]:
        del store[key]


def carry_tab_state(state: MutableMapping[str, Any], result: MoveResult, old_panel_id: str) -> None:
    """Re-key the moved tab's UI state from its old panel to its new one.

    Call before ``set_workspace``, which drops state for keys no longer open.
    Tabs for the same target in one panel share a key; when the destination
    already has state under it, that state is kept.
    """

    moved = next((t for t in result.workspace.iter_tabs() if t.id == result.new_tab_id), None)
    if moved is None:
        return
    store = _tab_states(state)
    old_key = composite_key(old_panel_id, moved.context_id)
    if old_key in store and old_key != moved.key:
        carried = store.pop(old_key)
        if moved.key in store:
            return
        store[moved.key] = carried
        logger.debug("Carried tab state %s -> %s", old_key, moved.key)
