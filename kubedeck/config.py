from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from kubedeck.config_utils import env_int, env_optional_str, env_path, env_str
from kubedeck.preferences import DEFAULT_PREFERENCES_PATH, Preferences


@dataclass(frozen=True)
class DashboardConfig:
    """Runtime configuration for the dashboard.

    Env vars:
    - KUBEDECK_KUBECONFIG: path to kubeconfig file (default loading rules if unset)
    - KUBEDECK_MAX_PANELS: upper bound on side-by-side panels
    - KUBEDECK_TAB_HISTORY_MAX: tab history entries kept for focus fallback
    - KUBEDECK_FETCH_TIMEOUT_SEC: Kubernetes API request timeout
    - KUBEDECK_LOG_LEVEL
    - KUBEDECK_PREFERENCES_PATH: JSON preferences file

    Values saved in the preferences file take precedence over env defaults.
    """

    kubeconfig: Optional[str]
    max_panels: int
    tab_history_max: int
    fetch_timeout_sec: int
    log_level: str
    preferences_path: Path

    DEFAULT_MAX_PANELS: int = 10
    DEFAULT_TAB_HISTORY_MAX: int = 100
    DEFAULT_FETCH_TIMEOUT_SEC: int = 10
    DEFAULT_LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        return cls(
            kubeconfig=env_optional_str("KUBEDECK_KUBECONFIG"),
            max_panels=env_int("KUBEDECK_MAX_PANELS", cls.DEFAULT_MAX_PANELS, minimum=1),
            tab_history_max=env_int("KUBEDECK_TAB_HISTORY_MAX", cls.DEFAULT_TAB_HISTORY_MAX, minimum=1),
            fetch_timeout_sec=env_int("KUBEDECK_FETCH_TIMEOUT_SEC", cls.DEFAULT_FETCH_TIMEOUT_SEC, minimum=1),
            log_level=env_str("KUBEDECK_LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
            preferences_path=env_path("KUBEDECK_PREFERENCES_PATH", DEFAULT_PREFERENCES_PATH),
        )

    def with_preferences(self, prefs: Preferences) -> "DashboardConfig":
        # Only values changed from the preference defaults override env settings.
        defaults = Preferences()
        cfg = self
        if prefs.general.kubeconfig_path:
            cfg = replace(cfg, kubeconfig=prefs.general.kubeconfig_path)
        if prefs.tab_history.max_size != defaults.tab_history.max_size:
            cfg = replace(cfg, tab_history_max=prefs.tab_history.max_size)
        if prefs.general.resource_fetch_timeout_sec != defaults.general.resource_fetch_timeout_sec:
            cfg = replace(cfg, fetch_timeout_sec=prefs.general.resource_fetch_timeout_sec)
        return cfg
