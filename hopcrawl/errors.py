"""
Per-URL failures raised by pipeline stages.

A raised error only discards the URL it concerns; the crawl goes on.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError

__all__ = (
    "CrawlError",
    "PrefetchError",
    "InvalidHost",
    "InvalidScheme",
    "InvalidMimeType",
    "RequestTooLarge",
    "AlreadyVisited",
    "FetchError",
    "STAGE_ERRORS",
)


class CrawlError(Exception):
    """Base class for errors that drop a single URL from the crawl."""

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        super().__init__(f"{url}: {message}" if message else url)


class PrefetchError(CrawlError):
    """A validator rejected the URL before any GET request."""


class InvalidHost(PrefetchError):
    """No host, unresolvable host, or host outside the crawl scope."""


class InvalidScheme(PrefetchError):
    """Scheme not among ``accepted_schemes``."""


class InvalidMimeType(PrefetchError):
    """HEAD probe reported a content type outside ``accepted_mime_types``."""


class RequestTooLarge(PrefetchError):
    """HEAD probe reported a Content-Length above ``max_content_length``."""


class AlreadyVisited(PrefetchError):
    pass


class FetchError(CrawlError):
    """Transport failure during the GET request."""


# Anything else raised by a stage is a bug and propagates to the consumer.
STAGE_ERRORS = (CrawlError, ClientError, asyncio.TimeoutError)
