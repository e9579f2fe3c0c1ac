"""
Debounced search box controller.

Translates input events into replacements of the page URL's `query`
parameter. Only the last input of a burst takes effect: every new input
cancels the pending update and starts the delay over. The URL is replaced
rather than pushed, so no history entry is added.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable
from urllib.parse import parse_qsl, urlencode

from core import config

logger = logging.getLogger(__name__)

QUERY_PARAM = "query"

IDLE = "idle"
PENDING = "pending-debounce"


def _set_param(pairs: list[tuple[str, str]], name: str, value: str) -> list[tuple[str, str]]:
    # Replace the first occurrence in place and drop any repeats.
    out: list[tuple[str, str]] = []
    replaced = False
    for key, current in pairs:
        if key != name:
            out.append((key, current))
        elif not replaced:
            out.append((name, value))
            replaced = True
    if not replaced:
        out.append((name, value))
    return out


def build_search_url(pathname: str, search_params: str, term: str) -> str:
    """
    Return `pathname` with `query` set to `term`, or removed when `term` is empty.

    Other parameters keep their order.
    """
    pairs = parse_qsl((search_params or "").lstrip("?"), keep_blank_values=True)
    if term:
        pairs = _set_param(pairs, QUERY_PARAM, term)
    else:
        pairs = [(k, v) for (k, v) in pairs if k != QUERY_PARAM]
    query = urlencode(pairs)
    return f"{pathname}?{query}" if query else pathname


class SearchController:
    """
    Owns one search input and its single debounce timer.

    `search_params` is either the current query string or a callable that
    returns it; it is read when the timer fires, not when input arrives.
    `replace` receives the new URL.
    """

    def __init__(
        self,
        *,
        pathname: str,
        replace: Callable[[str], None],
        search_params: str | Callable[[], str] = "",
        delay_ms: int | None = None,
    ) -> None:
        self.pathname = pathname
        self._replace = replace
        self._search_params = search_params
        self.delay_ms = config.search_debounce_ms() if delay_ms is None else max(0, delay_ms)
        self._timer: asyncio.TimerHandle | asyncio.Handle | None = None
        self.value = self.initial_value

    @property
    def search_params(self) -> str:
        if callable(self._search_params):
            return self._search_params()
        return self._search_params

    @property
    def initial_value(self) -> str:
        """
        Input value seeded from the current `query` parameter.
        """
        for key, value in parse_qsl(self.search_params.lstrip("?"), keep_blank_values=True):
            if key == QUERY_PARAM:
                return value
        return ""

    @property
    def state(self) -> str:
        return PENDING if self._timer is not None else IDLE

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def handle_input(self, term: str) -> None:
        """
        Record an input event. Must be called from inside a running event loop.
        """
        self.value = term
        self.cancel()
        loop = asyncio.get_running_loop()
        if self.delay_ms == 0:
            self._timer = loop.call_soon(self._fire, term)
        else:
            self._timer = loop.call_later(self.delay_ms / 1000, self._fire, term)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, term: str) -> None:
        self._timer = None
        url = build_search_url(self.pathname, self.search_params, term)
        if not callable(self._search_params):
            self._search_params = url.partition("?")[2]
        logger.debug("search_replace url=%s", url)
        self._replace(url)
