# === FILE: hopcrawl/scanner.py ===
"""
Wrapper that runs a crawl to completion and flattens it into report rows.
"""
from typing import Any, Dict, List, Optional

from hopcrawl.crawler.crawler import Crawl
from hopcrawl.logger import logger


async def start_crawl(crawl: Crawl, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Consume the crawl stream and return one row per visited page.

    Parameters
    ----------
    crawl : Crawl
        Crawl to execute.
    limit : int, optional
        Stop after this many visited pages.

    Returns
    -------
    List[Dict[str, Any]]
        ``{"url", "status", "depth"}`` for each page, in visit order.
    """
    logger.info("Crawl started: %s", ", ".join(crawl.urls))
    visits = await crawl.collect(limit=limit)
    logger.info("Crawl finished: %d pages", len(visits))
    return [
        {"url": url, "status": getattr(response, "status", None), "depth": state.depth}
        for url, response, state in visits
    ]

__all__ = ["start_crawl"]
