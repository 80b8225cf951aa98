from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_PREFERENCES_PATH = _REPO_ROOT / "data" / "preferences.json"
SCHEMA_VERSION = 1

THEMES = ("dark", "light", "system")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe_int(v: Any, default: int, *, minimum: int = 1) -> int:
    if isinstance(v, bool):
        return default
    try:
        value = int(v)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


def _safe_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, str):
        s = v.strip()
        return s or None
    return str(v)


@dataclass
class GeneralPreferences:
    kubeconfig_path: str = ""
    resource_fetch_timeout_sec: int = 10
    theme: str = "dark"


@dataclass
class TabHistoryPreferences:
    max_size: int = 100


@dataclass
class Preferences:
    """User preferences persisted to disk.

    Missing or corrupt files fall back to defaults, and each field is
    validated on its own so one bad value does not discard the rest.
    """

    schema_version: int = SCHEMA_VERSION
    updated_at: str = field(default_factory=_utc_now_iso)
    general: GeneralPreferences = field(default_factory=GeneralPreferences)
    tab_history: TabHistoryPreferences = field(default_factory=TabHistoryPreferences)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": int(self.schema_version),
            "updated_at": str(self.updated_at),
            "general": {
                "kubeconfig_path": self.general.kubeconfig_path,
                "resource_fetch_timeout_sec": int(self.general.resource_fetch_timeout_sec),
                "theme": self.general.theme,
            },
            "tab_history": {"max_size": int(self.tab_history.max_size)},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, raw_json: str) -> "Preferences":
        return _parse_preferences(json.loads(raw_json))


def _parse_preferences(raw: Any) -> Preferences:
    defaults = Preferences()
    if not isinstance(raw, dict):
        return defaults

    schema_version = raw.get("schema_version", SCHEMA_VERSION)
    if not isinstance(schema_version, int) or schema_version <= 0:
        schema_version = SCHEMA_VERSION

    general_raw = raw.get("general") if isinstance(raw.get("general"), dict) else {}
    theme = _safe_str(general_raw.get("theme")) or defaults.general.theme
    general = GeneralPreferences(
        kubeconfig_path=_safe_str(general_raw.get("kubeconfig_path")) or "",
        resource_fetch_timeout_sec=_safe_int(
            general_raw.get("resource_fetch_timeout_sec"), defaults.general.resource_fetch_timeout_sec
        ),
        theme=theme if theme in THEMES else defaults.general.theme,
    )

    history_raw = raw.get("tab_history") if isinstance(raw.get("tab_history"), dict) else {}
    tab_history = TabHistoryPreferences(
        max_size=_safe_int(history_raw.get("max_size"), defaults.tab_history.max_size),
    )

    return Preferences(
        schema_version=schema_version,
        updated_at=_safe_str(raw.get("updated_at")) or defaults.updated_at,
        general=general,
        tab_history=tab_history,
    )


def load_preferences(*, path: Path = DEFAULT_PREFERENCES_PATH) -> Preferences:
    """Load preferences from disk; defaults when the file is missing or unreadable."""

    if not path.exists():
        return Preferences()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable preferences at %s: %s", path, exc)
        return Preferences()

    return _parse_preferences(raw)


def save_preferences(prefs: Preferences, *, path: Path = DEFAULT_PREFERENCES_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    prefs.updated_at = _utc_now_iso()
    path.write_text(prefs.to_json(), encoding="utf-8")
    logger.info("Saved preferences to %s", path)
