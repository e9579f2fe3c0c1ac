"""
Login / logout endpoints.

`router` is mounted at the login path; `protected_router` under the
protected prefix (see `main.create_app`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import RedirectResponse

from core import config

from . import dependencies, service

router = APIRouter()
protected_router = APIRouter()


@router.get("")
async def login_page() -> dict:
    return {"page": "login", "action": config.login_path()}


@router.post("")
async def login(
    email: str | None = Form(default=None),
    password: str | None = Form(default=None),
) -> RedirectResponse:
    _, token = await service.login(email, password)
    response = RedirectResponse(config.protected_prefix(), status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        service.ACCESS_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        max_age=config.access_token_expire_minutes() * 60,
    )
    return response


@protected_router.post("/logout")
async def logout() -> RedirectResponse:
    response = RedirectResponse(config.login_path(), status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(service.ACCESS_COOKIE)
    return response


@protected_router.get("/me")
async def me(user: dict = Depends(dependencies.get_current_user)) -> dict:
    return service.to_user_response(user).model_dump()
