from __future__ import annotations

import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV_VAR = "STACKED_CHARTS_LOG_LEVEL"
NOISY_LOGGERS = ("matplotlib", "PIL")


def configure_logging(level: str | None = None) -> None:
    resolved = (level or os.getenv(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # Font discovery and image plugins log heavily at DEBUG.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
