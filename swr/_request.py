"""
Fetch requestor — runs the fetcher and turns failures into error events.

A request always settles to a value: the fetched data, or None when the
fetcher raised. The exception itself goes out on the error channel, so the
cache can drop the key instead of holding a dangling pending entry.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from swr._channel import Channel
from swr._types import Fetcher, ResolvedKey

logger = logging.getLogger("swr.request")

DEFAULT_TIMEOUT = 10.0


# ═══════════════════════════════════════════════════════════════════════════════
# Default Fetcher — HTTP GET + JSON
# ═══════════════════════════════════════════════════════════════════════════════


async def http_fetcher(url: ResolvedKey) -> Any:
    """
    Fetch `url` with a GET request and decode its JSON body.

    Raises:
        httpx.HTTPStatusError: non-2xx response
        httpx.RequestError: transport failure
        json.JSONDecodeError: body is not JSON
    """
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()


# ═══════════════════════════════════════════════════════════════════════════════
# Requestor
# ═══════════════════════════════════════════════════════════════════════════════


class Requestor:
    """
    Invokes fetchers on behalf of one engine.

    Example:
        errors = Channel[BaseException]("errors")
        requestor = Requestor(errors)
        data = await requestor.request("/api/user", fetch_json)  # None on failure
    """

    def __init__(self, errors: Channel[BaseException]) -> None:
        self._errors = errors

    @property
    def errors(self) -> Channel[BaseException]:
        return self._errors

    async def request[D](self, key: ResolvedKey, fetcher: Fetcher[D]) -> D | None:
        """Fetch key. Never raises fetcher errors; publishes them instead."""
        logger.debug(f"Fetching {key!r}")
        try:
            return await fetcher(key)
        except Exception as e:
            logger.warning(f"Fetch failed for {key!r}: {e!r}")
            self._errors.publish(key, e)
            return None


__all__ = ("DEFAULT_TIMEOUT", "http_fetcher", "Requestor")
