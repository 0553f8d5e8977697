"""Engine definition and URL building"""

from dataclasses import dataclass
from urllib.parse import urlsplit

PLACEHOLDER = "%s"


def build_url(template: str, query: str) -> str:
    """
    Build the final URL for a query.

    If the template contains the ``%s`` placeholder, every occurrence is
    replaced by the query. Otherwise the query is appended to the template.
    The query is inserted verbatim, no URL encoding is applied.

    Args:
        template: Base URL or URL template
        query: Raw query text

    Returns:
        The resulting URL string
    """
    if PLACEHOLDER in template:
        return template.replace(PLACEHOLDER, query)
    return template + query


def looks_like_url(url: str) -> bool:
    """Advisory check that a string has a scheme and a host"""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


@dataclass(frozen=True)
class Engine:
    """A named search provider"""
    name: str
    url_template: str

    def build_url(self, query: str) -> str:
        return build_url(self.url_template, query)
