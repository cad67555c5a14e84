# hopcrawl/crawler/fetcher.py
"""
Fetcher module: single-shot HTTP requests over aiohttp and the default fetch stage.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from hopcrawl.config import CrawlConfig
from hopcrawl.crawler.models import CrawlState
from hopcrawl.errors import FetchError
from hopcrawl.logger import logger

__all__ = ("Response", "request", "default_fetch")


@dataclass(frozen=True, slots=True)
class Response:
    """Status, headers (case-insensitive) and raw body of one HTTP exchange."""

    url: str
    status: int
    headers: Mapping[str, str]
    body: bytes = b""
    charset: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode(self.charset or "utf-8", errors="replace")


def _request_kwargs(options: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    kwargs = dict(options or {})
    timeout = kwargs.get("timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        kwargs["timeout"] = ClientTimeout(total=timeout)
    return kwargs


async def request(method: str, url: str, options: Optional[Mapping[str, Any]] = None) -> Response:
    """
    Perform one request without retries.

    *options* are passed verbatim to :meth:`aiohttp.ClientSession.request`,
    except that a numeric ``timeout`` becomes ``ClientTimeout(total=...)``.
    Transport errors (``aiohttp.ClientError``, ``asyncio.TimeoutError``) propagate.
    """
    kwargs = _request_kwargs(options)
    async with ClientSession() as session:
        async with session.request(method, url, **kwargs) as resp:
            body = b"" if method.upper() == "HEAD" else await resp.read()
            return Response(
                url=str(resp.url),
                status=resp.status,
                headers=resp.headers,
                body=body,
                charset=resp.charset,
            )


async def default_fetch(url: str, state: CrawlState, config: CrawlConfig) -> tuple[Response, CrawlState]:
    """GET *url* once with ``config.fetch_options``; HTTP error statuses are still responses."""
    try:
        response = await request("GET", url, config.fetch_options)
    except (ClientError, asyncio.TimeoutError) as exc:
        raise FetchError(url, str(exc) or type(exc).__name__) from exc
    logger.debug("GET %s -> %s", url, response.status)
    return response, state
