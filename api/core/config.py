"""
Environment-backed settings.

Values are read on every call so tests can patch `os.environ` without
reloading modules. Blank or invalid values fall back to the default.
"""

from __future__ import annotations

import os

TRUTHY = {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in TRUTHY


def _normalize_prefix(path: str, default: str) -> str:
    path = "/" + path.strip("/")
    # Routers are mounted under these prefixes, so the root is not allowed.
    return path if path != "/" else default


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def protected_prefix() -> str:
    return _normalize_prefix(_env_str("PROTECTED_PREFIX", "/dashboard"), "/dashboard")


def login_path() -> str:
    return _normalize_prefix(_env_str("LOGIN_PATH", "/login"), "/login")


def invoices_path() -> str:
    return protected_prefix() + "/invoices"


def search_debounce_ms() -> int:
    return max(0, _env_int("SEARCH_DEBOUNCE_MS", 300))


def catch_create_errors() -> bool:
    return _env_bool("CATCH_CREATE_ERRORS", True)


def invoices_page_size() -> int:
    size = _env_int("INVOICES_PAGE_SIZE", 6)
    return size if size > 0 else 6


def view_cache_dir() -> str | None:
    # None lets diskcache create a private temporary directory.
    return os.environ.get("VIEW_CACHE_DIR", "").strip() or None


def view_cache_size_limit() -> int:
    size = _env_int("VIEW_CACHE_SIZE_LIMIT", 64 * 1024 * 1024)
    return size if size > 0 else 64 * 1024 * 1024


def jwt_secret() -> str:
    # Local default keeps development simple; set JWT_SECRET in production.
    return _env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return _env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 60)
