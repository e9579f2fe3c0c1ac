"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from . import service


def get_current_user_id(request: Request) -> str:
    # The gate middleware already resolved the token for this request.
    user_id = getattr(request.state, "user_id", None) or service.user_id_from_request(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
        )
    return user_id


async def get_current_user(request: Request) -> dict:
    return await service.get_user(get_current_user_id(request))
