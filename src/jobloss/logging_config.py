from __future__ import annotations

import logging

from jobloss.config import get_settings

_LOG_CONFIGURED = False

# Libraries that are noisy at INFO/DEBUG. The request middleware already logs
# one line per HTTP request, so uvicorn's access log would only duplicate it.
_QUIET_LOGGERS = ("urllib3", "uvicorn.access")


def configure_logging(level: str | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
    _LOG_CONFIGURED = True
