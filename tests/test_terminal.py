import errno
import io
import os
import sys

import pytest
from rich.console import Console

from conftest import ENGINES_TEXT
from websearch.engines import EngineCatalog
from websearch.errors import TerminalIOError
from websearch.selector import InteractiveSelector
from websearch.terminal import Key, KeyDecoder, KeyEvent, RawTerminal, decode_keys


def test_decode_printable_characters():
    assert decode_keys("aé") == [KeyEvent.of("a"), KeyEvent.of("é")]


@pytest.mark.parametrize("data", ["\r", "\n"])
def test_decode_enter(data):
    assert decode_keys(data) == [KeyEvent(Key.ENTER)]


@pytest.mark.parametrize("data", ["\x7f", "\x08"])
def test_decode_backspace(data):
    assert decode_keys(data) == [KeyEvent(Key.BACKSPACE)]


def test_decode_lone_escape_and_escape_sequences():
    assert decode_keys("\x1b") == [KeyEvent(Key.ESCAPE)]
    assert decode_keys("\x1b[A") == [KeyEvent(Key.OTHER)]
    assert decode_keys("\x1bOP") == [KeyEvent(Key.OTHER)]


def test_decode_control_characters_are_other():
    assert decode_keys("\t\x01") == [KeyEvent(Key.OTHER), KeyEvent(Key.OTHER)]


def test_decode_ctrl_c_is_interrupt():
    assert decode_keys("\x03") == [KeyEvent(Key.INTERRUPT)]


def test_decode_q_is_a_plain_character():
    assert decode_keys("q") == [KeyEvent.of("q")]


def test_escape_sequence_split_across_reads_is_not_escape():
    decoder = KeyDecoder()
    assert decoder.feed("\x1b") == []
    assert decoder.feed("[A") == [KeyEvent(Key.OTHER)]
    assert decoder.flush() == []


def test_escape_sequence_inside_pasted_text():
    assert decode_keys("ab\x1b[Bc") == [
        KeyEvent.of("a"),
        KeyEvent.of("b"),
        KeyEvent(Key.OTHER),
        KeyEvent.of("c"),
    ]


def test_pending_escape_is_released_by_flush():
    decoder = KeyDecoder()
    assert decoder.feed("\x1b") == []
    assert decoder.flush() == [KeyEvent(Key.ESCAPE)]


def test_missing_file_descriptor_raises_terminal_error():
    terminal = RawTerminal(stdin=io.StringIO(), console=Console(file=io.StringIO()))
    with pytest.raises(TerminalIOError):
        terminal.enter_raw_mode()


class BreakableFile(io.StringIO):
    """Console file whose writes fail with EIO once broken"""

    broken = False

    def write(self, text):
        if self.broken:
            raise OSError(errno.EIO, "Input/output error")
        return super().write(text)

    def flush(self):
        if self.broken:
            raise OSError(errno.EIO, "Input/output error")


@pytest.fixture
def pty_pair():
    if sys.platform == "win32":
        pytest.skip("pty is POSIX only")
    master, slave = os.openpty()
    stdin = os.fdopen(slave, "r")
    yield master, slave, stdin
    stdin.close()
    os.close(master)


@pytest.fixture
def pty_terminal(pty_pair):
    master, slave, stdin = pty_pair
    terminal = RawTerminal(stdin=stdin, console=Console(file=io.StringIO()))
    return master, slave, terminal


def _broken_terminal(stdin, broken=False):
    out = BreakableFile()
    out.broken = broken
    return out, RawTerminal(stdin=stdin, console=Console(file=out, force_terminal=True))


def test_session_restores_terminal_mode(pty_terminal):
    import termios

    _, slave, terminal = pty_terminal
    before = termios.tcgetattr(slave)
    assert before[3] & termios.ICANON

    with terminal.session():
        during = termios.tcgetattr(slave)
        assert not during[3] & termios.ICANON
        assert not during[3] & termios.ECHO

    assert termios.tcgetattr(slave) == before


def test_session_restores_terminal_mode_on_error(pty_terminal):
    import termios

    _, slave, terminal = pty_terminal
    before = termios.tcgetattr(slave)

    with pytest.raises(RuntimeError):
        with terminal.session():
            raise RuntimeError("boom")

    assert termios.tcgetattr(slave) == before


def test_write_failure_on_enter_restores_mode(pty_pair):
    import termios

    _, slave, stdin = pty_pair
    before = termios.tcgetattr(slave)
    _, terminal = _broken_terminal(stdin, broken=True)

    with pytest.raises(TerminalIOError):
        with terminal.session():
            pass

    assert termios.tcgetattr(slave) == before


def test_write_failure_on_exit_restores_mode(pty_pair):
    import termios

    _, slave, stdin = pty_pair
    before = termios.tcgetattr(slave)
    out, terminal = _broken_terminal(stdin)

    with pytest.raises(TerminalIOError):
        with terminal.session():
            out.broken = True

    assert termios.tcgetattr(slave) == before


def test_render_failure_raises_terminal_error_and_restores_mode(pty_pair):
    import termios

    _, slave, stdin = pty_pair
    before = termios.tcgetattr(slave)
    out, terminal = _broken_terminal(stdin)

    with pytest.raises(TerminalIOError):
        with terminal.session():
            out.broken = True
            terminal.render(["am", "Available engines: amazon"])

    assert termios.tcgetattr(slave) == before


def test_selector_write_failure_restores_mode(pty_pair):
    import termios

    _, slave, stdin = pty_pair
    before = termios.tcgetattr(slave)
    out = BreakableFile()

    class FailsAfterEnter(RawTerminal):
        def enter_raw_mode(self):
            super().enter_raw_mode()
            out.broken = True

    terminal = FailsAfterEnter(stdin=stdin, console=Console(file=out, force_terminal=True))
    with pytest.raises(TerminalIOError):
        InteractiveSelector(terminal).run(EngineCatalog.parse(ENGINES_TEXT))

    assert termios.tcgetattr(slave) == before


def test_read_keys_from_pty(pty_terminal):
    master, _, terminal = pty_terminal

    with terminal.session():
        events = terminal.read_keys()
        os.write(master, b"a")
        assert next(events) == KeyEvent.of("a")
        os.write(master, b"\x1b[A")
        assert next(events) == KeyEvent(Key.OTHER)
        os.write(master, b"\x1b")
        assert next(events) == KeyEvent(Key.ESCAPE)
        events.close()


def test_ctrl_c_from_pty_raises_keyboard_interrupt(pty_terminal):
    master, _, terminal = pty_terminal

    with terminal.session():
        events = terminal.read_keys()
        os.write(master, b"\x03")
        with pytest.raises(KeyboardInterrupt):
            next(events)
