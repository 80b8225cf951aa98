import streamlit as st

from kubedeck import __version__
from kubedeck.config import DashboardConfig
from kubedeck.log import configure_logging
from kubedeck.preferences import load_preferences
from kubedeck.theme import set_theme

cfg = DashboardConfig.from_env()
configure_logging(cfg.log_level)
set_theme(mode=load_preferences(path=cfg.preferences_path).general.theme)

st.markdown(
    """
    <style>
    .main-hero {
        border-radius: 18px;
        padding: 2.2rem 2rem 1.8rem 2rem;
        max-width: 860px;
        margin: 2.5rem auto 1.5rem auto;
        text-align: center;
        border: 1px solid rgba(148, 163, 184, 0.35);
    }
    .main-hero h1 {
        font-size: 2.6rem;
        font-weight: 800;
        color: #0ea5e9;
        margin-bottom: 0.4rem;
        letter-spacing: 1px;
    }
    .main-hero .desc {
        font-size: 1.05rem;
        margin-bottom: 1.2rem;
        opacity: 0.85;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

st.markdown(
    f"""
    <div class="main-hero">
      <h1>☸️ kubedeck</h1>
      <div class="desc">Open clusters from your kubeconfig as tabs, split them side by side,
      and browse pods, deployments, services, events, nodes and namespaces.</div>
      <div class="desc"><small>v{__version__}</small></div>
    </div>
    """,
    unsafe_allow_html=True,
)

c1, c2 = st.columns(2)
with c1:
    st.page_link("pages/1_Workspace.py", label="Open workspace", icon="🗂️", use_container_width=True)
with c2:
    st.page_link("pages/2_Preferences.py", label="Preferences", icon="⚙️", use_container_width=True)
