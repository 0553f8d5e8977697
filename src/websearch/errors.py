"""Error types raised by websearch"""


class SearchError(Exception):
    """Base exception for websearch errors."""

    pass


class ConfigUnavailable(SearchError):
    """The engines file could not be read."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Does not exist: {path}" if not reason else f"Cannot read {path}: {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason


class MalformedLineError(SearchError):
    """A configuration line does not hold a name and a URL separated by a tab."""

    def __init__(self, line: str, line_number: int):
        super().__init__(f"Malformed line {line_number}: {line!r}")
        self.line = line
        self.line_number = line_number


class EngineNotFound(SearchError):
    """No engine with exactly this name exists in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"engine not found: {name}")
        self.name = name


class TerminalIOError(SearchError):
    """Reading from or writing to the terminal failed."""

    def __init__(self, reason: str):
        super().__init__(f"Terminal error: {reason}")
        self.reason = reason


class LaunchError(SearchError):
    """The URL opener could not be started."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to open {url}: {reason}")
        self.url = url
        self.reason = reason
