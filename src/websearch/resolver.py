"""Resolve command-line input into an engine and a final URL"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .engines import EngineCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """The engine chosen for a search and the URL to open"""
    engine_name: str
    url: str


def resolve(
    catalog: EngineCatalog,
    engine_name: Optional[str],
    query: Optional[str],
    *,
    select_engine: Callable[[EngineCatalog], Optional[str]],
    ask_query: Callable[[], str],
) -> Optional[Resolution]:
    """
    Resolve an engine and query into a URL.

    A missing engine name is chosen with ``select_engine`` and a missing query
    is read with ``ask_query``. Returns None when engine selection is
    cancelled, in which case no query is asked for and no URL is built.

    Raises:
        EngineNotFound: the engine name is not in the catalog
    """
    if not engine_name:
        engine_name = select_engine(catalog)
        if engine_name is None:
            return None

    engine = catalog.lookup_exact(engine_name)

    if query is None:
        query = ask_query()

    url = engine.build_url(query)
    logger.debug("Resolved %r with query %r to %s", engine.name, query, url)
    return Resolution(engine_name=engine.name, url=url)
