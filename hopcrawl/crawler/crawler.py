# === FILE: hopcrawl/crawler/crawler.py ===
"""
The crawl pipeline and its breadth-first traversal engine.

    async for url, response, state in Crawl("https://example.com/").stream():
        print("Visited", url, response.status)

Each candidate URL goes through three stages: *prefetch* (validation),
*fetch* (the request) and *next* (link discovery). Any of them can be
replaced, see :mod:`hopcrawl.crawler.stages` for the contracts.
"""
from __future__ import annotations

from collections import deque
from contextlib import aclosing
from dataclasses import KW_ONLY, dataclass, replace
from typing import Any, AsyncIterator, Callable, Deque, List, Mapping, Optional, Sequence, Tuple, Union

from hopcrawl.config import CONFIG_KEYS, CrawlConfig
from hopcrawl.crawler.fetcher import default_fetch
from hopcrawl.crawler.link_extractor import default_next, registrable_domain
from hopcrawl.crawler.models import CrawlState, FrontierEntry
from hopcrawl.crawler.stages import STAGE_ARITY, call_stage, check_stage
from hopcrawl.crawler.validators import default_prefetch
from hopcrawl.errors import STAGE_ERRORS
from hopcrawl.logger import logger

__all__ = ("Crawl", "Visit")

Visit = Tuple[str, Any, CrawlState]


def _seed_urls(urls: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    if isinstance(urls, str):
        return (urls,)
    if not isinstance(urls, Sequence):
        raise TypeError(f"expected a URL or a sequence of URLs, got {type(urls).__name__}")
    seeds = tuple(urls)
    if not seeds:
        raise ValueError("at least one seed URL is required")
    if not all(isinstance(u, str) for u in seeds):
        raise TypeError("seed URLs must be strings")
    return seeds


def _coerce_config(config: Union[CrawlConfig, Mapping[str, Any], None]) -> CrawlConfig:
    if config is None:
        return CrawlConfig()
    if isinstance(config, CrawlConfig):
        return config
    if isinstance(config, Mapping):
        return CrawlConfig(**config)
    raise TypeError(f"config must be a CrawlConfig or a mapping, got {type(config).__name__}")


@dataclass(frozen=True)
class Crawl:
    """
    Immutable description of a crawl: seeds, stages and configuration.

    Building one performs no I/O. Builders (``with_*``, ``put_config``)
    return a new instance.
    """

    urls: Union[str, Sequence[str]]
    _: KW_ONLY
    prefetch: Optional[Callable[..., Any]] = None
    fetch: Optional[Callable[..., Any]] = None
    next: Optional[Callable[..., Any]] = None
    config: Union[CrawlConfig, Mapping[str, Any], None] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "urls", _seed_urls(self.urls))
        defaults = {"prefetch": default_prefetch, "fetch": default_fetch, "next": default_next}
        for name in STAGE_ARITY:
            stage = getattr(self, name)
            object.__setattr__(self, name, defaults[name] if stage is None else check_stage(name, stage))
        object.__setattr__(self, "config", _coerce_config(self.config))

    # ------------------------------------------------------------------ #
    # Builders                                                           #
    # ------------------------------------------------------------------ #

    def with_prefetch(self, prefetch: Callable[..., Any]) -> Crawl:
        """Replace the validation stage, e.g. to add a robots.txt check."""
        return replace(self, prefetch=prefetch)

    def with_fetch(self, fetch: Callable[..., Any]) -> Crawl:
        """Replace the request stage; its response is passed to *next* untouched."""
        return replace(self, fetch=fetch)

    def with_next(self, next: Callable[..., Any]) -> Crawl:
        """Replace the stage that picks the links crawled after each page."""
        return replace(self, next=next)

    # ------------------------------------------------------------------ #
    # Configuration                                                      #
    # ------------------------------------------------------------------ #

    def put_config(self, key: str, value: Any) -> Crawl:
        if key not in CONFIG_KEYS:
            raise KeyError(f"unknown config key {key!r}")
        return replace(self, config={**self.config.model_dump(), key: value})

    def get_config(self, key: str) -> Any:
        if key not in CONFIG_KEYS:
            raise KeyError(f"unknown config key {key!r}")
        return getattr(self.config, key)

    # ------------------------------------------------------------------ #
    # Execution                                                          #
    # ------------------------------------------------------------------ #

    async def stream(self, state: Optional[CrawlState] = None) -> AsyncIterator[Visit]:
        """
        Crawl breadth-first and yield ``(url, response, state)`` per visited page.

        Pages are fetched on demand: nothing past the last yielded page is
        requested until the consumer asks for more. URLs that fail any stage
        are skipped and stay unvisited, so they may be tried again when
        reached through another link. The first frontier entry deeper than
        ``max_depth`` ends the crawl.
        """
        max_depth = self.config.max_depth
        state = (state or CrawlState()).with_hostnames(registrable_domain(u) for u in self.urls)
        frontier: Deque[FrontierEntry] = deque(FrontierEntry(u, 0) for u in self.urls)

        while frontier:
            url, depth = frontier[0]
            if url in state.visited:
                frontier.popleft()
                continue
            if depth > max_depth:
                logger.debug("Depth limit %d reached at %s", max_depth, url)
                return
            frontier.popleft()

            try:
                response, links, stage_state = await self._visit(url, state.at_depth(depth))
            except STAGE_ERRORS as exc:
                logger.debug("Dropped %s: %s", url, exc)
                continue

            state = replace(stage_state, visited=state.visited, hostnames=state.hostnames).visit(url)
            frontier.extend(FrontierEntry(link, depth + 1) for link in links)
            yield url, response, state

    async def _visit(self, url: str, state: CrawlState) -> Tuple[Any, Sequence[str], CrawlState]:
        config = self.config
        url = await call_stage(self.prefetch, url, state, config)
        response, state = await call_stage(self.fetch, url, state, config)
        links, state = await call_stage(self.next, url, response, state, config)
        return response, links, state

    async def collect(self, limit: Optional[int] = None, state: Optional[CrawlState] = None) -> List[Visit]:
        """Drain :meth:`stream` into a list, stopping after *limit* pages if given."""
        visits: List[Visit] = []
        if limit is not None and limit <= 0:
            return visits
        async with aclosing(self.stream(state)) as pages:
            async for visit in pages:
                visits.append(visit)
                if limit is not None and len(visits) >= limit:
                    break
        return visits
