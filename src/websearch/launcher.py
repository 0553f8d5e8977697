"""Open URLs with the platform browser or a configured command"""

import logging
import shlex
import subprocess
import webbrowser
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .errors import LaunchError

logger = logging.getLogger(__name__)


class BrowserLauncher(ABC):
    """Abstract interface for launching URLs in a browser."""

    @abstractmethod
    def launch(self, url: str) -> None:
        """Launch a URL in the default web browser.

        Args:
            url: The URL to open in the browser
        """
        ...


class DefaultBrowserLauncher(BrowserLauncher):
    """Opens URLs with the webbrowser module"""

    def launch(self, url: str) -> None:
        logger.debug("Opening %s with the default browser", url)
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as e:
            raise LaunchError(url, str(e)) from e
        if not opened:
            raise LaunchError(url, "no browser available")


class CommandLauncher(BrowserLauncher):
    """Spawns a command such as ``xdg-open`` with the URL as last argument"""

    def __init__(self, command: str):
        self.argv = shlex.split(command)
        if not self.argv:
            raise ValueError("opener command is empty")

    def launch(self, url: str) -> None:
        argv = [*self.argv, url]
        logger.debug("Spawning %s", argv)
        try:
            # Detached: the launcher does not wait for the browser
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise LaunchError(url, str(e)) from e


def get_launcher(config: Optional[Dict[str, Any]] = None) -> BrowserLauncher:
    """Get the launcher for the configured opener"""
    opener = (config or {}).get("opener")
    if opener and opener.strip():
        return CommandLauncher(opener)
    return DefaultBrowserLauncher()
