import logging
from pathlib import Path

import pytest

from kubedeck import log
from kubedeck.config import DashboardConfig
from kubedeck.preferences import DEFAULT_PREFERENCES_PATH, Preferences


ENV_VARS = (
    "KUBEDECK_KUBECONFIG",
    "KUBEDECK_MAX_PANELS",
    "KUBEDECK_TAB_HISTORY_MAX",
    "KUBEDECK_FETCH_TIMEOUT_SEC",
    "KUBEDECK_LOG_LEVEL",
    "KUBEDECK_PREFERENCES_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = DashboardConfig.from_env()
    assert cfg.kubeconfig is None
    assert cfg.max_panels == 10
    assert cfg.tab_history_max == 100
    assert cfg.fetch_timeout_sec == 10
    assert cfg.log_level == "INFO"
    assert cfg.preferences_path == DEFAULT_PREFERENCES_PATH


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("KUBEDECK_KUBECONFIG", " /tmp/kubeconfig ")
    monkeypatch.setenv("KUBEDECK_MAX_PANELS", "4")
    monkeypatch.setenv("KUBEDECK_TAB_HISTORY_MAX", "20")
    monkeypatch.setenv("KUBEDECK_LOG_LEVEL", "debug")
    monkeypatch.setenv("KUBEDECK_PREFERENCES_PATH", str(tmp_path / "p.json"))

    cfg = DashboardConfig.from_env()

    assert cfg.kubeconfig == "/tmp/kubeconfig"
    assert cfg.max_panels == 4
    assert cfg.tab_history_max == 20
    assert cfg.log_level == "DEBUG"
    assert cfg.preferences_path == Path(tmp_path / "p.json")


@pytest.mark.parametrize("raw", ["zero", "0", "-3", ""])
def test_invalid_integers_fall_back(monkeypatch, raw):
    monkeypatch.setenv("KUBEDECK_MAX_PANELS", raw)
    assert DashboardConfig.from_env().max_panels == 10


def test_preferences_override_only_changed_values(monkeypatch):
    monkeypatch.setenv("KUBEDECK_TAB_HISTORY_MAX", "30")
    monkeypatch.setenv("KUBEDECK_FETCH_TIMEOUT_SEC", "5")
    cfg = DashboardConfig.from_env()

    untouched = cfg.with_preferences(Preferences())
    assert untouched == cfg

    prefs = Preferences()
    prefs.general.kubeconfig_path = "~/.kube/other"
    prefs.general.resource_fetch_timeout_sec = 25
    merged = cfg.with_preferences(prefs)
    assert merged.kubeconfig == "~/.kube/other"
    assert merged.fetch_timeout_sec == 25
    assert merged.tab_history_max == 30


def test_configure_logging_sets_package_level():
    log.configure_logging("debug")
    assert logging.getLogger("kubedeck").level == logging.DEBUG

    log.configure_logging("not-a-level")
    assert logging.getLogger("kubedeck").level == logging.INFO
