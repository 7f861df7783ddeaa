from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
# Third-party loggers that flood DEBUG output with connection chatter.
QUIET_LOGGERS = ("aiohttp", "pymongo")


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure root logging for a harvest run or the API server.
    ``level`` falls back to HARVESTER_LOG_LEVEL, then INFO; unknown names mean INFO.
    """
    if level is None:
        level = os.getenv("HARVESTER_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
