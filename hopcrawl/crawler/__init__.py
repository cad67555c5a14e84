"""Crawl pipeline: state, stages, default validators and the traversal engine."""

from hopcrawl.crawler.crawler import Crawl, Visit
from hopcrawl.crawler.fetcher import Response, default_fetch, request
from hopcrawl.crawler.link_extractor import default_next, fetch_links, normalize_link, registrable_domain
from hopcrawl.crawler.models import CrawlState, FrontierEntry
from hopcrawl.crawler.stages import Fetch, Next, Prefetch
from hopcrawl.crawler.validators import (
    chain_validators,
    default_prefetch,
    validate_content,
    validate_hostname,
    validate_scheme,
    validate_visited,
)

__all__ = [
    "Crawl",
    "CrawlState",
    "Fetch",
    "FrontierEntry",
    "Next",
    "Prefetch",
    "Response",
    "Visit",
    "chain_validators",
    "default_fetch",
    "default_next",
    "default_prefetch",
    "fetch_links",
    "normalize_link",
    "registrable_domain",
    "request",
    "validate_content",
    "validate_hostname",
    "validate_scheme",
    "validate_visited",
]
