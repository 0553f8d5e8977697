"""Configuration management for websearch"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from ..errors import ConfigUnavailable

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

ENGINES_FILE = "~/.config/search_engines"

DEFAULT_CONFIG = {
    "engines_file": ENGINES_FILE,
    "opener": None,  # None means the platform default browser
    "log_level": "WARNING",
}

ENV_OVERRIDES = {
    "WEBSEARCH_ENGINES_FILE": "engines_file",
    "WEBSEARCH_OPENER": "opener",
    "WEBSEARCH_LOG_LEVEL": "log_level",
}

RC_NAME = ".websearchrc"


def get_config_path() -> Path:
    """The rc file of the working directory if present, else the one in $HOME"""
    candidates = [Path(RC_NAME), Path.home() / RC_NAME]
    return next((p for p in candidates if p.exists()), candidates[-1])


def _read_rc_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def load_config() -> Dict[str, Any]:
    """Defaults, overlaid by the rc file, overlaid by WEBSEARCH_* variables"""
    config = {**DEFAULT_CONFIG, **_read_rc_file(get_config_path())}
    config.update(
        (key, os.environ[name]) for name, key in ENV_OVERRIDES.items() if os.environ.get(name)
    )
    return config


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in a path"""
    return Path(os.path.expandvars(os.path.expanduser(path)))


class ConfigSource:
    """Supplies the raw text of the engines file"""

    def __init__(self, path: str = ENGINES_FILE):
        self.path = path

    @classmethod
    def default(cls, config: Optional[Dict[str, Any]] = None) -> "ConfigSource":
        """Build a source from the configured engines file"""
        config = config or load_config()
        return cls(config.get("engines_file") or ENGINES_FILE)

    def read_text(self) -> str:
        """
        Read the engines file.

        Raises:
            ConfigUnavailable: the file is missing or unreadable
        """
        path = expand_path(self.path)
        logger.debug("Reading engines from %s", path)
        if not path.is_file():
            raise ConfigUnavailable(self.path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigUnavailable(self.path, str(e)) from e

    def __repr__(self) -> str:
        return f"ConfigSource({self.path!r})"
