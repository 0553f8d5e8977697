#!/usr/bin/env python3
"""
search - open web searches from your terminal
Maps a short engine name to a URL and opens it in the browser
"""

import logging
import sys
from typing import Optional

import click

from . import __version__
from .engines import EngineCatalog, looks_like_url
from .errors import ConfigUnavailable, SearchError
from .launcher import get_launcher
from .resolver import resolve
from .selector import InteractiveSelector
from .terminal import RawTerminal
from .utils.config import ConfigSource, load_config
from .utils.logger import setup_logging
from .utils.output import console, copy_to_clipboard, display_engines, err_console, print_error

logger = logging.getLogger(__name__)


def _select_engine(catalog: EngineCatalog) -> Optional[str]:
    """Pick an engine interactively"""
    if not sys.stdin.isatty():
        raise click.UsageError("No engine specified!")
    return InteractiveSelector(RawTerminal()).run(catalog)


def _ask_query() -> str:
    """Prompt for the query on a plain line"""
    query = click.prompt("Specify query", default="", show_default=False).strip()
    if not query:
        raise click.UsageError("No query specified!")
    return query


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('engine', required=False)
@click.argument('query', nargs=-1)
@click.option('--list', 'list_engines', is_flag=True, help='List available engines and exit')
@click.option('--print', 'print_only', is_flag=True, help='Print the URL instead of opening it')
@click.option('--copy', is_flag=True, help='Copy the URL to clipboard')
@click.option('--config', 'engines_file', type=click.Path(dir_okay=False),
              help='Engines file (default: ~/.config/search_engines)')
@click.option('--lenient', is_flag=True, help='Skip malformed lines in the engines file')
@click.option('-v', '--verbose', is_flag=True, help='Show debug logging')
@click.version_option(version=__version__, prog_name='search')
@click.pass_context
def cli(
    ctx,
    engine: Optional[str],
    query: tuple,
    list_engines: bool,
    print_only: bool,
    copy: bool,
    engines_file: Optional[str],
    lenient: bool,
    verbose: bool,
):
    """
    search - open a web search in your browser

    ENGINE is a name from the engines file, QUERY is substituted for %s in
    its URL or appended to it. Without ENGINE an interactive picker filters
    engines as you type (Enter selects, Esc or q cancels). Without QUERY
    you are prompted for one.

    \b
    Engines file (tab-separated, # starts a comment):
        ddg     https://duckduckgo.com/?q=
        err     https://doc.rust-lang.org/error_codes/E%s.html

    \b
    Examples:
        search ddg rust borrow checker
        search err 0382 --print
        search                          # pick engine interactively
        search --list
    """
    config = load_config()
    setup_logging('DEBUG' if verbose else config.get('log_level'))

    source = ConfigSource(engines_file) if engines_file else ConfigSource.default(config)

    try:
        text = source.read_text()
        catalog = EngineCatalog.parse_lenient(text) if lenient else EngineCatalog.parse(text)
        logger.debug("Loaded %d engines from %s", len(catalog), source.path)

        if list_engines:
            display_engines(catalog.names())
            return

        resolution = resolve(
            catalog,
            engine,
            ' '.join(query) if query else None,
            select_engine=_select_engine,
            ask_query=_ask_query,
        )
        if resolution is None:
            console.print("[yellow]No engine selected[/yellow]")
            return

        url = resolution.url
        if not looks_like_url(url):
            logger.warning("%r does not look like a URL", url)

        if print_only:
            print(url)
        else:
            get_launcher(config).launch(url)

        if copy:
            copy_to_clipboard(url)

    except ConfigUnavailable as e:
        print_error(str(e))
        err_console.print(f"Requires: {source.path}", highlight=False, markup=False)
        ctx.exit(1)
    except SearchError as e:
        print_error(str(e))
        ctx.exit(1)


if __name__ == '__main__':
    cli()
