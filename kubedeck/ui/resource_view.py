from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from kubedeck.kube.resources import RESOURCE_KINDS, fetch_kind, rows_of, to_yaml_text
from kubedeck.workspace import Tab


logger = logging.getLogger(__name__)

_PLOTLY_TEMPLATE = "plotly_white"
_NO_PICK = "(none)"


def _style_fig(fig, *, height: int = 260):
    fig.update_layout(
        template=_PLOTLY_TEMPLATE,
        height=height,
        margin=dict(l=10, r=10, t=40, b=10),
        font=dict(family="Inter, Segoe UI, Arial, sans-serif", size=12),
        title=dict(x=0.02, xanchor="left", font=dict(size=14)),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0.0),
        colorway=px.colors.qualitative.Set2,
    )
    return fig


def rows_to_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """DataFrame for display; dict/list cells are stringified compactly."""

    df = pd.DataFrame(rows)
    for col in df.columns:
        if df[col].apply(lambda v: isinstance(v, (dict, list))).any():
            df[col] = df[col].apply(lambda v: json.dumps(v, ensure_ascii=False) if isinstance(v, (dict, list)) else v)
    return df


def filter_frame(df: pd.DataFrame, query: str) -> pd.DataFrame:
    q = (query or "").strip().lower()
    if not q or df.empty:
        return df
    mask = df.astype(str).apply(lambda s: s.str.lower().str.contains(q, na=False, regex=False))
    return df[mask.any(axis=1)]


def count_by(rows: List[Dict[str, Any]], key: str) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for row in rows:
        v = str(row.get(key) or "Unknown")
        out[v] = out.get(v, 0) + 1
    return out


def _render_phase_chart(rows: List[Dict[str, Any]], key_prefix: str) -> None:
    counts = count_by(rows, "phase")
    if not counts:
        return
    df = pd.DataFrame({"phase": list(counts.keys()), "pods": list(counts.values())})
    fig = px.pie(df, names="phase", values="pods", hole=0.55, title="Pods by phase")
    st.plotly_chart(_style_fig(fig), use_container_width=True, key=f"{key_prefix}_phase")


def render_tab_content(
    tab: Tab,
    tab_state: Dict[str, Any],
    *,
    load_clients: Callable[[str], Any],
    timeout: Optional[int] = None,
) -> None:
    """Resource kind selector, table and detail inspector for one tab.

    ``tab_state`` is the renderer-owned state for this tab; the last result
    is cached there until the user refreshes or changes kind/namespace.
    """

    key_prefix = f"res_{tab.key}"
    kinds = list(RESOURCE_KINDS)

    c1, c2, c3 = st.columns([2, 2, 1])
    with c1:
        kind = st.selectbox(
            "Kind",
            options=kinds,
            index=kinds.index(tab_state.get("kind", "Pods")),
            key=f"{key_prefix}_kind",
        )
    with c2:
        namespace = st.text_input(
            "Namespace",
            value=tab_state.get("namespace", ""),
            key=f"{key_prefix}_ns",
            placeholder="all namespaces",
            disabled=not RESOURCE_KINDS[kind]["namespaced"],
        )
    with c3:
        st.write("")
        refresh = st.button("↻", key=f"{key_prefix}_refresh", help="Refresh", use_container_width=True)

    fetch_sig = f"{kind}|{namespace.strip()}"
    if refresh or tab_state.get("fetch_sig") != fetch_sig or "result" not in tab_state:
        with st.spinner(f"Loading {kind.lower()} from {tab.target.display_name}..."):
            try:
                clients = load_clients(tab.context_id)
                result = fetch_kind(clients, kind, namespace.strip() or None, timeout=timeout)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not reach %s: %s", tab.context_id, exc)
                result = {"ok": False, "error": str(exc)}
        tab_state.update({"kind": kind, "namespace": namespace, "fetch_sig": fetch_sig, "result": result})

    result = tab_state.get("result")
    if not isinstance(result, dict) or not result.get("ok"):
        st.error(f"Failed to list {kind.lower()}")
        with st.expander("Details", expanded=False):
            st.json(result)
        return

    rows = rows_of(result, kind)
    if not rows:
        st.info("No rows.")
        return

    if kind == "Pods":
        _render_phase_chart(rows, key_prefix)

    df = filter_frame(rows_to_frame(rows), st.text_input("Search", value="", key=f"{key_prefix}_q"))
    st.dataframe(df, use_container_width=True, hide_index=True, height=320)

    names = [str(r.get("name") or r.get("involvedObject") or i) for i, r in enumerate(rows)]
    pick = st.selectbox("Inspect", options=[_NO_PICK] + names, key=f"{key_prefix}_inspect")
    tab_state["detail_visible"] = pick != _NO_PICK
    if pick != _NO_PICK:
        row = rows[names.index(pick)]
        st.code(to_yaml_text(row), language="yaml")
