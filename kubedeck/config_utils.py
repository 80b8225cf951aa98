from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_optional_str(name: str) -> Optional[str]:
    """Stripped value, or None when unset or blank."""

    value = (os.environ.get(name) or "").strip()
    return value or None


def env_path(name: str, default: Path) -> Path:
    value = env_optional_str(name)
    return Path(value).expanduser() if value else default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    """Integer env var; unparsable values and values below ``minimum`` fall back to ``default``."""

    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value
