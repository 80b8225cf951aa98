import streamlit as st

from kubedeck.config import DashboardConfig
from kubedeck.log import configure_logging
from kubedeck.preferences import THEMES, load_preferences, save_preferences
from kubedeck.theme import set_theme


PAGE_TITLE = "Preferences"


def main() -> None:
    cfg = DashboardConfig.from_env()
    configure_logging(cfg.log_level)
    prefs = load_preferences(path=cfg.preferences_path)
    set_theme(PAGE_TITLE, mode=prefs.general.theme)

    st.title("Preferences")
    st.caption(f"Stored in {cfg.preferences_path}")

    with st.form("preferences"):
        st.subheader("General")
        kubeconfig_path = st.text_input(
            "Kubeconfig path",
            value=prefs.general.kubeconfig_path,
            placeholder=cfg.kubeconfig or "~/.kube/config",
        )
        timeout = st.number_input(
            "Resource fetch timeout (seconds)",
            min_value=1,
            max_value=300,
            value=int(prefs.general.resource_fetch_timeout_sec),
        )
        theme = st.selectbox("Theme", options=list(THEMES), index=THEMES.index(prefs.general.theme))

        st.subheader("Tab history")
        max_size = st.number_input(
            "Entries kept for focus fallback",
            min_value=1,
            max_value=1000,
            value=int(prefs.tab_history.max_size),
        )

        if st.form_submit_button("Save"):
            prefs.general.kubeconfig_path = kubeconfig_path.strip()
            prefs.general.resource_fetch_timeout_sec = int(timeout)
            prefs.general.theme = theme
            prefs.tab_history.max_size = int(max_size)
            save_preferences(prefs, path=cfg.preferences_path)
            # Contexts may come from a different kubeconfig now.
            st.session_state.pop("_ctx_tree", None)
            st.success("Preferences saved.")


main()
