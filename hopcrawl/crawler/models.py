# hopcrawl/crawler/models.py
"""
Data models for the hopcrawl traversal: crawl state snapshots and frontier entries.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, NamedTuple, Optional


class FrontierEntry(NamedTuple):
    """A discovered URL waiting in the frontier, with its link depth."""

    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class CrawlState:
    """Immutable snapshot of a crawl.

    ``visited`` and ``hostnames`` belong to the engine; stages may return a
    state with a new ``payload`` but the engine keeps its own copies of the
    other two sets.
    """

    visited: FrozenSet[str] = frozenset()
    hostnames: FrozenSet[str] = frozenset()
    depth: int = 0
    last_visited_url: Optional[str] = None
    payload: Any = field(default_factory=dict)

    def visit(self, url: str) -> CrawlState:
        """Mark *url* as visited and remember it as the last crawled URL."""
        return replace(self, visited=self.visited | {url}, last_visited_url=url)

    def with_hostnames(self, hostnames: Iterable[Optional[str]]) -> CrawlState:
        return replace(self, hostnames=self.hostnames | {h for h in hostnames if h})

    def at_depth(self, depth: int) -> CrawlState:
        return replace(self, depth=depth)
