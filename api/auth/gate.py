"""
Route-level authorization gate.

`authorize` is a pure function of (authenticated?, requested path); the
middleware below evaluates it on every navigation before a protected
route runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core import config

from . import service

logger = logging.getLogger(__name__)

# Paths the gate never sees (health checks, static assets).
EXCLUDED_PREFIXES = ("/health", "/static", "/favicon.ico")


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    pass


@dataclass(frozen=True)
class Redirect:
    location: str


Decision = Allow | Deny | Redirect


def is_under(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def authorize(
    is_authenticated: bool,
    path: str,
    *,
    protected_prefix: str = "/dashboard",
    home_path: str | None = None,
) -> Decision:
    """
    Decide what happens to a navigation.

    Protected paths are allowed only when authenticated. Authenticated users
    requesting anything else are sent to the protected area's home page.
    """
    if is_under(path, protected_prefix):
        return Allow() if is_authenticated else Deny()
    if is_authenticated:
        return Redirect(home_path or protected_prefix)
    return Allow()


def _is_excluded(path: str) -> bool:
    return any(is_under(path, prefix) for prefix in EXCLUDED_PREFIXES)


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Applies `authorize` to every request outside `EXCLUDED_PREFIXES`.

    Denied navigations are sent to the login page.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if _is_excluded(path):
            return await call_next(request)

        user_id = service.user_id_from_request(request)
        request.state.user_id = user_id
        decision = authorize(
            user_id is not None,
            path,
            protected_prefix=config.protected_prefix(),
        )

        if isinstance(decision, Deny):
            logger.debug("auth_gate_deny path=%s", path)
            return RedirectResponse(config.login_path(), status_code=status.HTTP_303_SEE_OTHER)
        if isinstance(decision, Redirect):
            logger.debug("auth_gate_redirect path=%s location=%s", path, decision.location)
            return RedirectResponse(decision.location, status_code=status.HTTP_303_SEE_OTHER)
        return await call_next(request)
