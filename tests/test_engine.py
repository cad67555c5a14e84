# File: tests/test_engine.py
# Traversal engine tests with in-memory stages (no network)
from __future__ import annotations

from dataclasses import replace

import pytest
from pydantic import ValidationError

from hopcrawl.config import CrawlConfig
from hopcrawl.crawler.crawler import Crawl
from hopcrawl.crawler.models import CrawlState
from hopcrawl.errors import InvalidHost

A = "http://example.com/"
B = "http://example.com/b"
C = "http://example.com/c"
D = "http://example.com/d"
E = "http://example.com/e"

DIAMOND = {A: [B, C], B: [D], C: [D, E], D: [A], E: []}


async def urls_of(crawl: Crawl, state: CrawlState | None = None) -> list[str]:
    return [url for url, _, _ in await crawl.collect(state=state)]


# --------------------------------------------------------------------------- #
#                                Construction                                 #
# --------------------------------------------------------------------------- #


def test_defaults():
    crawl = Crawl(A)
    assert crawl.urls == (A,)
    assert crawl.get_config("max_depth") == 5
    assert crawl.get_config("max_content_length") == 1_000_000_000
    assert crawl.get_config("accepted_schemes") == frozenset({"http", "https"})
    assert crawl.get_config("crawl_query") is True
    assert crawl.get_config("crawl_fragment") is False
    assert "text/html" in crawl.get_config("accepted_mime_types")


def test_seed_sequence_and_mapping_config():
    crawl = Crawl([A, B], config={"max_depth": 2})
    assert crawl.urls == (A, B)
    assert crawl.config.max_depth == 2
    assert crawl.config.crawl_query is True


@pytest.mark.parametrize("urls,exc", [([], ValueError), (42, TypeError), ([A, 1], TypeError)])
def test_rejects_bad_seeds(urls, exc):
    with pytest.raises(exc):
        Crawl(urls)


def test_rejects_unknown_config_key():
    with pytest.raises(ValidationError):
        Crawl(A, config={"max_pages": 10})
    with pytest.raises(KeyError):
        Crawl(A).put_config("max_pages", 10)
    with pytest.raises(KeyError):
        Crawl(A).get_config("max_pages")


def test_put_config_returns_new_crawl():
    crawl = Crawl(A)
    deeper = crawl.put_config("max_depth", 9)
    assert deeper.get_config("max_depth") == 9
    assert crawl.get_config("max_depth") == 5
    with pytest.raises(ValidationError):
        crawl.put_config("max_depth", -1)


def test_rejects_stage_with_wrong_arity():
    with pytest.raises(TypeError):
        Crawl(A, prefetch=lambda url, state: url)
    with pytest.raises(TypeError):
        Crawl(A).with_next(lambda url, state, config: ([], state))
    with pytest.raises(TypeError):
        Crawl(A).with_fetch("not callable")


def test_builders_replace_single_stage(fake_site):
    site = fake_site(DIAMOND)
    crawl = Crawl(A).with_fetch(site.fetch)
    assert crawl.fetch == site.fetch
    assert crawl.prefetch is Crawl(A).prefetch


# --------------------------------------------------------------------------- #
#                                  Traversal                                  #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_breadth_first_order_without_duplicates(fake_site):
    site = fake_site(DIAMOND)
    assert await urls_of(Crawl(A, **site.stages())) == [A, B, C, D, E]
    assert site.fetched == [A, B, C, D, E]


@pytest.mark.asyncio()
async def test_depth_limit_is_a_hard_stop(fake_site, shallow_config):
    site = fake_site(DIAMOND)
    crawl = Crawl(A, config=shallow_config, **site.stages())
    assert await urls_of(crawl) == [A, B, C]
    assert D not in site.fetched and E not in site.fetched


@pytest.mark.asyncio()
async def test_depth_zero_visits_only_seeds(fake_site):
    site = fake_site(DIAMOND)
    crawl = Crawl([A, E], config={"max_depth": 0}, **site.stages())
    assert await urls_of(crawl) == [A, E]


@pytest.mark.asyncio()
async def test_seeds_come_first_in_order(fake_site):
    site = fake_site(DIAMOND)
    assert await urls_of(Crawl([C, B], **site.stages())) == [C, B, D, E, A]


@pytest.mark.asyncio()
async def test_yields_depth_and_visited_state(fake_site):
    site = fake_site(DIAMOND)
    visits = await Crawl(A, **site.stages()).collect()
    url, response, state = visits[2]
    assert url == C
    assert response == {"url": C, "status": 200}
    assert state.depth == 1
    assert state.last_visited_url == C
    assert state.visited == {A, B, C}
    assert state.hostnames == {"example.com"}


@pytest.mark.asyncio()
async def test_failed_fetch_is_skipped(fake_site):
    site = fake_site({A: [B, "http://example.com/missing", C], B: [], C: []})
    assert await urls_of(Crawl(A, **site.stages())) == [A, B, C]


@pytest.mark.asyncio()
async def test_rejected_url_is_not_marked_visited(fake_site):
    site = fake_site({A: [B, C], B: [], C: [B]})
    rejections = []

    def reject_b_once(url, state, config):
        if url == B and not rejections:
            rejections.append(url)
            raise InvalidHost(url, "flaky")
        return url

    crawl = Crawl(A, **site.stages()).with_prefetch(reject_b_once)
    assert await urls_of(crawl) == [A, C, B]
    assert rejections == [B]


@pytest.mark.asyncio()
async def test_unexpected_stage_error_propagates(fake_site):
    site = fake_site(DIAMOND)

    def broken_next(url, response, state, config):
        raise RuntimeError("bug in stage")

    crawl = Crawl(A, **site.stages()).with_next(broken_next)
    with pytest.raises(RuntimeError):
        await crawl.collect()


@pytest.mark.asyncio()
async def test_stream_is_lazy(fake_site):
    site = fake_site(DIAMOND)
    pages = Crawl(A, **site.stages()).stream()
    url, _, _ = await pages.__anext__()
    await pages.aclose()
    assert url == A
    assert site.fetched == [A]


@pytest.mark.asyncio()
async def test_collect_limit(fake_site):
    site = fake_site(DIAMOND)
    visits = await Crawl(A, **site.stages()).collect(limit=2)
    assert [url for url, _, _ in visits] == [A, B]
    assert site.fetched == [A, B]


@pytest.mark.asyncio()
async def test_resume_from_caller_state(fake_site):
    site = fake_site(DIAMOND)
    state = CrawlState(visited=frozenset({B}), payload={"run": 2})
    visits = await Crawl(A, **site.stages()).collect(state=state)
    assert [url for url, _, _ in visits] == [A, C, D, E]
    assert visits[-1][2].payload == {"run": 2}


@pytest.mark.asyncio()
async def test_payload_is_threaded_through_stages(fake_site, counting_fetch):
    site = fake_site(DIAMOND)
    crawl = Crawl(A, **site.stages()).with_fetch(counting_fetch)
    visits = await crawl.collect()
    assert [state.payload["fetches"] for _, _, state in visits] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio()
async def test_stages_cannot_rewrite_engine_sets(fake_site):
    site = fake_site(DIAMOND)

    def forgetful_next(url, response, state, config):
        links, _ = site.next(url, response, state, config)
        return links, replace(state, visited=frozenset(), hostnames=frozenset({"evil.com"}))

    visits = await Crawl(A, **site.stages()).with_next(forgetful_next).collect()
    assert [url for url, _, _ in visits] == [A, B, C, D, E]
    assert visits[-1][2].hostnames == {"example.com"}


@pytest.mark.asyncio()
async def test_async_stages_are_awaited(fake_site):
    site = fake_site(DIAMOND)

    async def fetch(url, state, config):
        return site.fetch(url, state, config)

    async def prefetch(url, state, config):
        return url

    crawl = Crawl(A, prefetch=prefetch, fetch=fetch, next=site.next, config=CrawlConfig(max_depth=1))
    assert await urls_of(crawl) == [A, B, C]
