"""
Disk-backed cache for rendered dashboard views.

Entries are tagged with the route path that produced them and keyed by
path plus query string. Mutations call `revalidate_path`, which evicts
every entry carrying that path's tag so the next request is recomputed
from the database. The cache is bounded by `size_limit`; diskcache culls
the least recently stored entries beyond it.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import diskcache

from . import config

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    return "/" + (path or "").strip().strip("/")


class ViewCache:
    """
    Path-scoped cache of view payloads.

    Each path carries a generation number that `revalidate_path` bumps. A
    load that started before a revalidation is returned to its caller but
    never stored, so a pre-mutation result cannot outlive the invalidation.
    """

    def __init__(self, cache_dir: str | None = None, size_limit: int | None = None) -> None:
        self._cache = diskcache.Cache(
            cache_dir,
            size_limit=size_limit or config.view_cache_size_limit(),
            tag_index=True,
        )
        self._generations: dict[str, int] = {}

    @property
    def directory(self) -> str:
        return self._cache.directory

    def __len__(self) -> int:
        return len(self._cache)

    @staticmethod
    def _key(path: str, key: str) -> str:
        return f"{path}?{key}"

    def generation(self, path: str) -> int:
        return self._generations.get(_normalize_path(path), 0)

    def get(self, path: str, key: str = "") -> Any | None:
        path = _normalize_path(path)
        return self._cache.get(self._key(path, key), default=None)

    def set(self, path: str, key: str, value: Any) -> None:
        path = _normalize_path(path)
        self._cache.set(self._key(path, key), value, tag=path)

    async def get_or_load(
        self,
        path: str,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return the cached payload for (path, key) or await `loader` and store it.
        """
        cached = self.get(path, key)
        if cached is not None:
            return cached

        started_at = self.generation(path)
        value = await loader()
        if self.generation(path) == started_at:
            self.set(path, key, value)
        else:
            logger.debug("view_cache_skip_stale path=%s key=%s", _normalize_path(path), key)
        return value

    def revalidate_path(self, path: str) -> int:
        """
        Drop every entry cached under `path`. Returns how many were dropped.
        """
        path = _normalize_path(path)
        self._generations[path] = self._generations.get(path, 0) + 1
        dropped = self._cache.evict(path)
        logger.info("revalidate_path path=%s dropped=%s", path, dropped)
        return dropped

    def clear(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        self._cache.close()


# Process-wide instance used by the routers.
views = ViewCache(config.view_cache_dir())
