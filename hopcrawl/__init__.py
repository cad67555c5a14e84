"""
hopcrawl package initializer.
Defines package version and exposes the crawl API and CLI.
"""
__version__ = "0.1.0"

from hopcrawl.config import CrawlConfig, load_config
from hopcrawl.crawler import Crawl, CrawlState, fetch_links
from hopcrawl.errors import (
    AlreadyVisited,
    CrawlError,
    FetchError,
    InvalidHost,
    InvalidMimeType,
    InvalidScheme,
    RequestTooLarge,
)
# Expose CLI entry point
from hopcrawl.cli import cli as main_cli
