# hopcrawl/crawler/validators.py
"""
Prefetch validators.

Every validator takes ``(url, state, config)``, returns the URL when it passes
and raises a :class:`~hopcrawl.errors.PrefetchError` otherwise.
:func:`chain_validators` runs them left to right; the first error wins.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Iterable, Optional
from urllib.parse import urlsplit

from aiohttp import ClientError

from hopcrawl.config import CrawlConfig
from hopcrawl.crawler import fetcher
from hopcrawl.crawler.link_extractor import registrable_domain
from hopcrawl.crawler.models import CrawlState
from hopcrawl.crawler.stages import call_stage
from hopcrawl.errors import AlreadyVisited, InvalidHost, InvalidMimeType, InvalidScheme, RequestTooLarge
from hopcrawl.logger import logger

__all__ = (
    "resolve_host",
    "validate_hostname",
    "validate_scheme",
    "validate_content",
    "validate_visited",
    "chain_validators",
    "default_prefetch",
)


async def resolve_host(host: str) -> None:
    """Raise OSError when *host* does not resolve."""
    loop = asyncio.get_running_loop()
    await loop.getaddrinfo(host, None)


async def validate_hostname(url: str, state: CrawlState, config: CrawlConfig) -> str:
    """Host must exist, be inside the crawl scope and resolve in DNS."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        host = None
    if not host:
        raise InvalidHost(url, "no host")
    if registrable_domain(url) not in state.hostnames:
        raise InvalidHost(url, f"{host} is outside the crawl scope")
    try:
        await resolve_host(host)
    except OSError as exc:
        raise InvalidHost(url, f"cannot resolve {host}") from exc
    return url


def validate_scheme(url: str, state: CrawlState, config: CrawlConfig) -> str:
    scheme = urlsplit(url).scheme.lower()
    if scheme not in config.accepted_schemes:
        raise InvalidScheme(url, f"scheme {scheme!r} is not accepted")
    return url


def _accept_mime_type(content_type: Optional[str], accepted: Iterable[str]) -> bool:
    if not content_type:
        return True
    mime_type = content_type.split(";", 1)[0].strip().lower()
    return mime_type in accepted


def _accept_content_length(content_length: Optional[str], max_content_length: int) -> bool:
    if content_length is None:
        return True
    try:
        return int(content_length) <= max_content_length
    except ValueError:
        return True


async def validate_content(url: str, state: CrawlState, config: CrawlConfig) -> str:
    """
    Probe *url* with a single HEAD request and check Content-Type and Content-Length.

    A failed probe or a non-2xx answer accepts the URL: servers without HEAD
    support must not block the crawl. Missing headers are accepted too.
    """
    try:
        response = await fetcher.request("HEAD", url, config.fetch_options)
    except (ClientError, asyncio.TimeoutError) as exc:
        logger.debug("HEAD %s failed, accepting: %s", url, exc)
        return url
    if not response.ok:
        logger.debug("HEAD %s -> %s, accepting", url, response.status)
        return url

    content_type = response.headers.get("Content-Type")
    if not _accept_mime_type(content_type, config.accepted_mime_types):
        raise InvalidMimeType(url, f"content type {content_type!r} is not accepted")

    content_length = response.headers.get("Content-Length")
    if not _accept_content_length(content_length, config.max_content_length):
        raise RequestTooLarge(url, f"{content_length} bytes exceeds {config.max_content_length}")
    return url


def validate_visited(url: str, state: CrawlState, config: CrawlConfig) -> str:
    """Reject URLs already present in ``state.visited``."""
    if url in state.visited:
        raise AlreadyVisited(url, "already visited")
    return url


def chain_validators(*validators: Callable[..., object]) -> Callable[..., object]:
    """Compose validators into one prefetch stage."""

    async def prefetch(url: str, state: CrawlState, config: CrawlConfig) -> str:
        for validator in validators:
            url = await call_stage(validator, url, state, config)
        return url

    return prefetch


default_prefetch = chain_validators(validate_hostname, validate_scheme, validate_content)
