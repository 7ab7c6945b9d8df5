from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Set the level of the `lupulse` logger tree.

    Uvicorn installs the handlers; we only adjust levels for our package.
    Set `APP_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    """

    normalized = level.upper()
    logging.getLogger("lupulse").setLevel(normalized)
    logging.getLogger("lupulse").propagate = True
