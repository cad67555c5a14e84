# hopcrawl/crawler/stages.py
"""
Contracts of the three pluggable pipeline stages.

A stage returns its ``Ok`` value and signals rejection by raising a
:class:`~hopcrawl.errors.CrawlError`. Plain functions and coroutine functions
are both accepted.
"""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Protocol, Sequence, Tuple, TypeVar, Union

from hopcrawl.config import CrawlConfig
from hopcrawl.crawler.models import CrawlState

__all__ = ("Prefetch", "Fetch", "Next", "STAGE_ARITY", "check_stage", "call_stage")

T = TypeVar("T")
_MaybeAwaitable = Union[T, Awaitable[T]]


class Prefetch(Protocol):
    """Validate *url* before any GET; return the URL to fetch."""

    def __call__(self, url: str, state: CrawlState, config: CrawlConfig, /) -> _MaybeAwaitable[str]: ...


class Fetch(Protocol):
    """Request *url*; return the opaque response and the next state."""

    def __call__(
        self, url: str, state: CrawlState, config: CrawlConfig, /
    ) -> _MaybeAwaitable[Tuple[Any, CrawlState]]: ...


class Next(Protocol):
    """Pick the links to crawl after *url*; return them with the next state."""

    def __call__(
        self, url: str, response: Any, state: CrawlState, config: CrawlConfig, /
    ) -> _MaybeAwaitable[Tuple[Sequence[str], CrawlState]]: ...


STAGE_ARITY = {"prefetch": 3, "fetch": 3, "next": 4}


def check_stage(name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
    """Reject anything that cannot be called with the stage's positional arguments."""
    arity = STAGE_ARITY[name]
    if not callable(fn):
        raise TypeError(f"{name} stage must be callable, got {type(fn).__name__}")
    try:
        inspect.signature(fn).bind(*range(arity))
    except TypeError as exc:
        raise TypeError(f"{name} stage must accept {arity} positional arguments: {exc}") from exc
    return fn


async def call_stage(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
