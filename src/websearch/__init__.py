"""websearch - open web searches from your terminal"""

__version__ = "0.1.0"

from .cli import cli  # noqa: E402

__all__ = ['cli', '__version__']
