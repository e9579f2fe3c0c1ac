"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from . import repository, schemas, security

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "access_token"

INVALID_CREDENTIALS = "Invalid credentials."


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=str(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
    )


def token_from_request(request: Request) -> str | None:
    """
    Access token from the session cookie, falling back to a Bearer header.
    """
    cookie = (request.cookies.get(ACCESS_COOKIE) or "").strip()
    if cookie:
        return cookie

    scheme, _, token = (request.headers.get("authorization") or "").strip().partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def user_id_from_request(request: Request) -> str | None:
    token = token_from_request(request)
    if token is None:
        return None
    try:
        payload = security.decode_access_token(token)
    except security.AuthSecurityError:
        return None
    return str(payload["sub"])


async def login(email: str | None, password: str | None) -> tuple[schemas.UserResponse, str]:
    """
    Check credentials and issue an access token.
    """
    try:
        payload = schemas.LoginRequest(email=email or "", password=password or "")
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS) from exc

    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None or not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        logger.info("login_failed email=%s", repository.normalize_email(payload.email))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    user = to_user_response(user_row)
    token = security.build_access_token(user_id=user.id, email=user.email)
    logger.info("login_succeeded user_id=%s", user.id)
    return user, token


async def get_user(user_id: str) -> dict:
    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found.")
    return user_row
