from __future__ import annotations

import logging
import threading
from pathlib import Path

from sqlalchemy.engine import make_url

from jobloss.config import get_settings
from jobloss.db.base import Base
from jobloss.db.session import SessionLocal, engine
from jobloss.db import models  # noqa: F401
from jobloss.db.seed import seed_reports

logger = logging.getLogger(__name__)

_INITIALIZED = False
_INIT_LOCK = threading.Lock()


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [settings.data_dir]

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        paths.append(Path(url.database).parent)

    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database(*, seed: bool | None = None) -> dict[str, int]:
    settings = get_settings()
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)

    seeded = 0
    if settings.seed_on_startup if seed is None else seed:
        with SessionLocal() as session:
            seeded = seed_reports(session)
    return {"seeded_reports": seeded}


def ensure_initialized() -> None:
    """Run ``init_database`` once per process.

    Concurrent callers block on the lock until the first one finishes. If
    initialization raises, the flag stays unset and the next call retries.
    """
    global _INITIALIZED
    if _INITIALIZED:
        return
    with _INIT_LOCK:
        if _INITIALIZED:
            return
        result = init_database()
        logger.info("Database initialized %s", result)
        _INITIALIZED = True


def reset_initialized() -> None:
    global _INITIALIZED
    with _INIT_LOCK:
        _INITIALIZED = False
