"""hopcrawl.report: writers for crawl reports used by the CLI."""

from hopcrawl.report.json_report import render_json

__all__ = ["render_json"]
