from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process; later calls only adjust the kubedeck level.

    Streamlit re-executes page scripts on every interaction, so this has to
    be safe to call repeatedly.
    """

    global _configured
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not _configured:
        logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
        _configured = True
    logging.getLogger("kubedeck").setLevel(resolved)
