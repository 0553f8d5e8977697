"""Engine catalog parsed from the engines file"""

import logging
from typing import Iterable, Iterator

from ..errors import EngineNotFound, MalformedLineError
from .base import Engine

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
FIELD_SEPARATOR = "\t"


def _lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line number, line) pairs, splitting on newlines only"""
    for number, line in enumerate(text.split("\n"), start=1):
        yield number, line.removesuffix("\r")


def _is_skipped(line: str) -> bool:
    return not line or line.startswith(COMMENT_PREFIX)


def parse_line(line: str, line_number: int) -> Engine:
    """Parse one ``name<TAB>url`` line into an Engine"""
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) < 2 or not fields[0] or not fields[1]:
        raise MalformedLineError(line, line_number)
    if len(fields) > 2:
        logger.debug("Ignoring extra fields on line %d: %r", line_number, line)
    return Engine(name=fields[0], url_template=fields[1])


class EngineCatalog:
    """
    Ordered, immutable collection of engines.

    Order is the order of appearance in the engines file and is the display
    order of the interactive picker. When a name is defined twice the last
    definition wins and keeps the position of the first one.
    """

    def __init__(self, engines: Iterable[Engine] = ()):
        by_name: dict[str, Engine] = {}
        for engine in engines:
            if engine.name in by_name:
                logger.warning("Engine %r defined more than once, using the last definition", engine.name)
            by_name[engine.name] = engine
        self._by_name = by_name
        self._engines = tuple(by_name.values())

    @classmethod
    def parse(cls, text: str) -> "EngineCatalog":
        """
        Parse engines file contents, aborting on the first malformed line.

        Raises:
            MalformedLineError: a non-comment line lacks a name or a URL
        """
        engines = []
        for number, line in _lines(text):
            if _is_skipped(line):
                continue
            engines.append(parse_line(line, number))
        return cls(engines)

    @classmethod
    def parse_lenient(cls, text: str) -> "EngineCatalog":
        """Parse engines file contents, skipping malformed lines"""
        engines = []
        for number, line in _lines(text):
            if _is_skipped(line):
                continue
            try:
                engines.append(parse_line(line, number))
            except MalformedLineError as e:
                logger.warning("Skipping %s", e)
        return cls(engines)

    def lookup_exact(self, name: str) -> Engine:
        """Match an engine by name (case-sensitive)"""
        try:
            return self._by_name[name]
        except KeyError:
            raise EngineNotFound(name) from None

    def lookup_prefix(self, prefix: str) -> list[Engine]:
        """All engines whose name starts with prefix, in catalog order"""
        return [e for e in self._engines if e.name.startswith(prefix)]

    def names(self) -> list[str]:
        return [e.name for e in self._engines]

    def __iter__(self) -> Iterator[Engine]:
        return iter(self._engines)

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"EngineCatalog({self.names()!r})"
