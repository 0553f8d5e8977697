from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Iterator, Sequence

import pytest

# Make the src/ package importable without installing it
SRC = Path(__file__).resolve().parents[1] / "src"
src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)

from websearch.engines import EngineCatalog  # noqa: E402
from websearch.terminal import Key, KeyEvent, TerminalIO  # noqa: E402

ENGINES_TEXT = (
    "# search engines\n"
    "ddg\thttps://duckduckgo.com/?q=\n"
    "\n"
    "amazon\thttps://www.amazon.com/s?k=\n"
    "amazon2\thttps://www.amazon.co.uk/s?k=\n"
    "err\thttps://doc.rust-lang.org/error_codes/E%s.html\n"
)


def keys(text: str) -> list[KeyEvent]:
    """Key events for typing text; '\\n' is Enter, '\\b' Backspace, '\\x1b' Esc"""
    events = []
    for char in text:
        if char == "\n":
            events.append(KeyEvent(Key.ENTER))
        elif char == "\b":
            events.append(KeyEvent(Key.BACKSPACE))
        elif char == "\x1b":
            events.append(KeyEvent(Key.ESCAPE))
        else:
            events.append(KeyEvent.of(char))
    return events


class FakeTerminal(TerminalIO):
    """Records mode changes and rendered screens instead of touching a tty"""

    def __init__(self, events: Iterable[KeyEvent] = (), fail_after: int | None = None):
        self.events = list(events)
        self.fail_after = fail_after
        self.calls: list[str] = []
        self.screens: list[list[str]] = []
        self.consumed = 0

    def enter_raw_mode(self) -> None:
        self.calls.append("enter")

    def exit_raw_mode(self) -> None:
        self.calls.append("exit")

    def read_keys(self) -> Iterator[KeyEvent]:
        for event in self.events:
            if self.fail_after is not None and self.consumed >= self.fail_after:
                raise OSError("input/output error")
            self.consumed += 1
            yield event
        if self.fail_after is not None and self.consumed >= self.fail_after:
            raise OSError("input/output error")

    def render(self, lines: Sequence[str]) -> None:
        self.screens.append(list(lines))

    @property
    def balanced(self) -> bool:
        return self.calls.count("enter") == self.calls.count("exit") and (
            not self.calls or self.calls[-1] == "exit"
        )


@pytest.fixture
def catalog() -> EngineCatalog:
    return EngineCatalog.parse(ENGINES_TEXT)


@pytest.fixture
def engines_file(tmp_path):
    path = tmp_path / "search_engines"
    path.write_text(ENGINES_TEXT, encoding="utf-8")
    return path
