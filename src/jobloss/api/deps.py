from __future__ import annotations

from collections.abc import Generator

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from jobloss.db.session import get_db_session


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def is_authenticated(request: Request) -> bool:
    return bool(request.session.get("authenticated"))


def require_editor(request: Request) -> None:
    if not is_authenticated(request):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
