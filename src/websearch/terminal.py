"""
Raw terminal access for the interactive engine picker.

The picker needs single key presses without line buffering or echo, and it
must leave the user's terminal exactly as it found it. ``TerminalIO`` wraps
that in a ``session()`` context manager; ``RawTerminal`` is the real
implementation on top of prompt_toolkit, tests substitute their own.
"""

import codecs
import logging
import os
import select
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, TextIO

from prompt_toolkit.input.vt100_parser import Vt100Parser
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from rich.console import Console

from .errors import TerminalIOError
from .utils.output import console as default_console

logger = logging.getLogger(__name__)

READ_SIZE = 1024

# Seconds to wait for the rest of an escape sequence before a lone ESC
# counts as the Escape key (prompt_toolkit's default ttimeoutlen)
ESCAPE_TIMEOUT = 0.5


class Key(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    INTERRUPT = "interrupt"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A single decoded key press"""
    key: Key
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        """Build the event for one typed character"""
        return cls(Key.CHAR, char)


KEY_MAP = {
    Keys.Escape: Key.ESCAPE,
    Keys.ControlM: Key.ENTER,
    Keys.ControlJ: Key.ENTER,
    Keys.ControlH: Key.BACKSPACE,
    Keys.ControlC: Key.INTERRUPT,
}


def to_key_event(key_press: KeyPress) -> KeyEvent:
    """Map a prompt_toolkit key press onto the picker's keys"""
    key = key_press.key
    if isinstance(key, Keys):
        return KeyEvent(KEY_MAP.get(key, Key.OTHER))
    if len(key) == 1 and key.isprintable():
        return KeyEvent.of(key)
    return KeyEvent(Key.OTHER)


class KeyDecoder:
    """
    Incremental VT100 key decoder.

    Escape sequences split across reads are held back until complete, so an
    arrow key never decodes as Escape followed by ``[A``. A lone ESC stays
    pending until ``flush()`` is called.
    """

    def __init__(self):
        self._presses: list[KeyPress] = []
        self._parser = Vt100Parser(self._presses.append)

    def feed(self, data: str) -> list[KeyEvent]:
        self._parser.feed(data)
        return self._drain()

    def flush(self) -> list[KeyEvent]:
        self._parser.flush()
        return self._drain()

    def _drain(self) -> list[KeyEvent]:
        events = [to_key_event(p) for p in self._presses]
        self._presses.clear()
        return events


def decode_keys(data: str) -> list[KeyEvent]:
    """Decode a complete chunk of terminal input"""
    decoder = KeyDecoder()
    return decoder.feed(data) + decoder.flush()


class TerminalIO(ABC):
    """Abstract terminal used by the interactive selector"""

    _active: bool = False

    @abstractmethod
    def enter_raw_mode(self) -> None:
        """Switch to unbuffered, no-echo input and hide the cursor"""
        ...

    @abstractmethod
    def exit_raw_mode(self) -> None:
        """Restore the mode and cursor saved by enter_raw_mode"""
        ...

    @abstractmethod
    def read_keys(self) -> Iterator[KeyEvent]:
        """Yield key events until input ends"""
        ...

    @abstractmethod
    def render(self, lines: Sequence[str]) -> None:
        """Clear the screen and draw lines from the top-left corner"""
        ...

    @contextmanager
    def session(self):
        """Hold raw mode for the duration of the block, restoring it on any exit"""
        if self._active:
            raise TerminalIOError("terminal session already active")
        self.enter_raw_mode()
        self._active = True
        try:
            yield self
        finally:
            self._active = False
            self.exit_raw_mode()


class RawTerminal(TerminalIO):
    """TerminalIO on a POSIX tty using prompt_toolkit's raw mode and VT100 parser"""

    def __init__(self, stdin: Optional[TextIO] = None, console: Optional[Console] = None):
        self.stdin = stdin or sys.stdin
        self.console = console or default_console
        self._raw_mode = None

    def _fileno(self) -> int:
        try:
            return self.stdin.fileno()
        except (AttributeError, ValueError, OSError) as e:
            raise TerminalIOError(f"stdin has no file descriptor: {e}") from e

    def _show_cursor(self, show: bool) -> None:
        try:
            self.console.show_cursor(show)
        except OSError as e:
            raise TerminalIOError(f"cannot write to terminal: {e}") from e

    def _restore_mode(self) -> None:
        raw_mode, self._raw_mode = self._raw_mode, None
        if raw_mode is not None:
            raw_mode.__exit__(None, None, None)

    def enter_raw_mode(self) -> None:
        import termios
        from prompt_toolkit.input import create_input

        self._fileno()
        try:
            raw_mode = create_input(self.stdin).raw_mode()
            raw_mode.__enter__()
        except (termios.error, OSError) as e:
            raise TerminalIOError(f"cannot enter raw mode: {e}") from e
        self._raw_mode = raw_mode

        try:
            self._show_cursor(False)
        except TerminalIOError:
            self._restore_mode()
            raise
        logger.debug("Entered raw mode on fd %d", self._fileno())

    def exit_raw_mode(self) -> None:
        try:
            self._restore_mode()
        finally:
            self._show_cursor(True)
        logger.debug("Restored terminal mode")

    def read_keys(self) -> Iterator[KeyEvent]:
        fd = self._fileno()
        utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        decoder = KeyDecoder()
        timeout = None
        ended = False

        while not ended:
            try:
                ready, _, _ = select.select([fd], [], [], timeout)
                if not ready:
                    # Nothing followed a pending ESC
                    events = decoder.flush()
                    timeout = None
                else:
                    data = os.read(fd, READ_SIZE)
                    if data:
                        events = decoder.feed(utf8.decode(data))
                        timeout = ESCAPE_TIMEOUT
                    else:
                        events = decoder.flush()
                        ended = True
            except OSError as e:
                raise TerminalIOError(f"cannot read key: {e}") from e

            for event in events:
                if event.key is Key.INTERRUPT:
                    raise KeyboardInterrupt
                yield event

    def render(self, lines: Sequence[str]) -> None:
        try:
            self.console.clear()
            for line in lines:
                self.console.print(line, markup=False, highlight=False, soft_wrap=True)
            self.console.file.flush()
        except OSError as e:
            raise TerminalIOError(f"cannot write to terminal: {e}") from e
