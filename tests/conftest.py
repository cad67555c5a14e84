# File: tests/conftest.py
from dataclasses import replace
from typing import Dict, List

import pytest

from hopcrawl.config import CrawlConfig
from hopcrawl.errors import FetchError


class FakeSite:
    """
    In-memory site for engine tests: *graph* maps each URL to the links on it.
    Records every fetched URL; URLs missing from the graph fail to fetch.
    """

    def __init__(self, graph: Dict[str, List[str]]) -> None:
        self.graph = graph
        self.fetched: List[str] = []

    def prefetch(self, url, state, config):
        return url

    def fetch(self, url, state, config):
        if url not in self.graph:
            raise FetchError(url, "not found")
        self.fetched.append(url)
        return {"url": url, "status": 200}, state

    def next(self, url, response, state, config):
        return list(self.graph[url]), state

    def stages(self) -> dict:
        return {"prefetch": self.prefetch, "fetch": self.fetch, "next": self.next}


@pytest.fixture()
def fake_site():
    """
    Factory for FakeSite instances.
    """
    return FakeSite


@pytest.fixture()
def counting_fetch():
    """
    Fetch stage that counts its calls in the state payload.
    """

    def fetch(url, state, config):
        payload = dict(state.payload)
        payload["fetches"] = payload.get("fetches", 0) + 1
        return {"url": url}, replace(state, payload=payload)

    return fetch


@pytest.fixture()
def shallow_config() -> CrawlConfig:
    """
    Return a config limited to one level of links.
    """
    return CrawlConfig(max_depth=1)
