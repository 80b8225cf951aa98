import os

import streamlit as st
from streamlit.errors import StreamlitAPIException


_ASSETS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "assets")


def set_theme(
    page_title: str = "kubedeck",
    page_icon: str = "☸️",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
    mode: str = "dark",
):
    """Configure Streamlit page & inject global CSS.

    ``mode`` is the preferences theme (dark|light|system); "system" leaves
    colours to the browser and only injects the layout rules.
    Safe to call once at top of each page. Subsequent calls will be ignored by
    Streamlit for page_config but CSS will still be (re)injected.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # set_page_config can only be called once; ignore if already set.
        pass

    css_files = ["custom_theme.css"]
    if mode in ("dark", "light"):
        css_files.append(f"theme_{mode}.css")

    for name in css_files:
        theme_file = os.path.join(_ASSETS_DIR, name)
        try:
            with open(theme_file, "r", encoding="utf-8") as f:
                st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
        except FileNotFoundError:
            st.error(f"Theme file not found at {theme_file}. Please check the file path.")
