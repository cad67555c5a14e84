# hopcrawl/crawler/link_extractor.py
"""
Link extraction and URL normalization utilities for hopcrawl.
"""
from __future__ import annotations

from typing import Any, List, Optional, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from hopcrawl.config import CrawlConfig
from hopcrawl.crawler.models import CrawlState
from hopcrawl.logger import logger

__all__ = ("registrable_domain", "normalize_link", "fetch_links", "default_next")


def registrable_domain(url: str) -> Optional[str]:
    """
    Return the last two labels of the URL's host (``a.b.example.com`` -> ``example.com``).

    Multi-label public suffixes such as ``co.uk`` are not recognised.
    """
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return ".".join(host.rstrip(".").split(".")[-2:])


def normalize_link(
    base_url: str,
    href: str,
    *,
    crawl_query: bool = True,
    crawl_fragment: bool = False,
) -> Optional[str]:
    """
    Resolve *href* against *base_url*, dropping the query and/or fragment
    unless they are crawled. Returns None when the result cannot be parsed.
    """
    try:
        parts = urlsplit(urljoin(base_url, href.strip()))
    except ValueError:
        return None
    if not crawl_query:
        parts = parts._replace(query="")
    if not crawl_fragment:
        parts = parts._replace(fragment="")
    return urlunsplit(parts)


def fetch_links(
    url: str,
    body: Union[str, bytes, None],
    *,
    crawl_query: bool = True,
    crawl_fragment: bool = False,
) -> List[str]:
    """
    Return the absolute targets of every ``<a href>`` in *body*.

    Links keep document order and appear once. A body that is missing or
    rejected by the parser yields an empty list.
    """
    if not isinstance(body, (str, bytes)):
        return []
    try:
        soup = BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.debug("Could not parse %s: %s", url, exc)
        return []

    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        link = normalize_link(url, href_val, crawl_query=crawl_query, crawl_fragment=crawl_fragment)
        if link is not None:
            links.append(link)
    return list(dict.fromkeys(links))


def default_next(
    url: str, response: Any, state: CrawlState, config: CrawlConfig
) -> tuple[List[str], CrawlState]:
    """Queue every link on the fetched page."""
    links = fetch_links(
        url,
        getattr(response, "body", None),
        crawl_query=config.crawl_query,
        crawl_fragment=config.crawl_fragment,
    )
    return links, state
