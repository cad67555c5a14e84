# === FILE: hopcrawl/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for hopcrawl.

Commands:
  crawl URL...   Crawl from the given seed URL(s) and print/save the visited pages
  config         Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (defaults are used when omitted)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Logfile (stderr only when omitted)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

crawl options:
  --max-depth INT     Override max_depth
  --limit INT         Stop after this many visited pages
  --json PATH         Save the JSON report to a file
  --pretty            Indent JSON printed to stdout
  --crawl-timeout SEC Timeout for the whole crawl (seconds)

Also:
  --version, -v       Show the hopcrawl version

Example:
  hopcrawl --config configs/crawl.yaml crawl https://example.com/ --limit 50 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from hopcrawl import __version__
from hopcrawl.config import load_config
from hopcrawl.crawler.crawler import Crawl
from hopcrawl.logger import configure
from hopcrawl.report.json_report import render_json
from hopcrawl.scanner import start_crawl

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='hopcrawl, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Logfile path (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """hopcrawl command group."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('urls', nargs=-1, required=True)
@click.option(
    '--max-depth', '-d', 'max_depth',
    type=click.IntRange(min=0),
    default=None,
    help='Override max_depth from the configuration'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Stop after this many visited pages'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON printed to stdout (2 spaces)'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.pass_context
def crawl(ctx, urls, max_depth, limit, json_output, pretty, crawl_timeout):
    """Crawl breadth-first from URLS and report the visited pages."""
    job = Crawl(list(urls), config=ctx.obj['config'])
    if max_depth is not None:
        job = job.put_config('max_depth', max_depth)

    try:
        if crawl_timeout:
            rows = asyncio.run(
                asyncio.wait_for(start_crawl(job, limit), timeout=crawl_timeout)
            )
        else:
            rows = asyncio.run(start_crawl(job, limit))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {crawl_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if json_output:
        try:
            saved_json = render_json(rows, json_output)
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')
        click.echo(f'JSON report: {saved_json}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps(rows, ensure_ascii=False, indent=indent))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
