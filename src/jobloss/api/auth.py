"""Single shared-password editor login backed by a signed session cookie."""

from __future__ import annotations

import logging
from functools import lru_cache

import bcrypt
from fastapi import APIRouter, HTTPException, Request, status

from jobloss.api.deps import is_authenticated
from jobloss.api.schemas import AuthCheckResponse, LoginRequest, OkResponse
from jobloss.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))


@lru_cache(maxsize=1)
def get_admin_password_hash() -> str:
    settings = get_settings()
    if not settings.admin_password:
        raise RuntimeError("ADMIN_PASSWORD environment variable is required")
    return hash_password(settings.admin_password, rounds=settings.bcrypt_rounds)


@router.post("/login", response_model=OkResponse)
def login(payload: LoginRequest, request: Request) -> OkResponse:
    if not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password required")

    if not verify_password(payload.password, get_admin_password_hash()):
        logger.warning("Rejected editor login from %s", request.client.host if request.client else "unknown")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong password")

    request.session["authenticated"] = True
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def logout(request: Request) -> OkResponse:
    request.session.clear()
    return OkResponse()


@router.get("/auth/check", response_model=AuthCheckResponse)
def auth_check(request: Request) -> AuthCheckResponse:
    return AuthCheckResponse(authenticated=is_authenticated(request))
