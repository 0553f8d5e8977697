"""Engine catalog and URL building"""

from .base import Engine, build_url, looks_like_url
from .catalog import EngineCatalog, parse_line

__all__ = [
    'Engine',
    'EngineCatalog',
    'build_url',
    'looks_like_url',
    'parse_line',
]
