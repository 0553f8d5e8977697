"""Interactive prefix picker for engine names"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .engines import Engine, EngineCatalog
from .errors import TerminalIOError
from .terminal import Key, KeyEvent, TerminalIO

logger = logging.getLogger(__name__)

CANCEL_CHARS = ("q",)
AVAILABLE_LABEL = "Available engines: "


class State(Enum):
    EDITING = "editing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class SelectionSession:
    """Typed input and outcome of one run of the picker"""
    catalog: EngineCatalog
    input_buffer: str = ""
    state: State = State.EDITING
    selection: Optional[str] = None

    @property
    def candidates(self) -> list[Engine]:
        return self.catalog.lookup_prefix(self.input_buffer)

    @property
    def done(self) -> bool:
        return self.state is not State.EDITING


class InteractiveSelector:
    """
    Let the user type a prefix of an engine name and pick the first match.

    Printable keys extend the input, Backspace shortens it, Enter confirms the
    first candidate in catalog order, Esc or ``q`` cancels. Enter with blank
    input or no candidates is ignored so the input can be corrected.
    """

    def __init__(self, terminal: TerminalIO):
        self.terminal = terminal

    @staticmethod
    def feed(session: SelectionSession, event: KeyEvent) -> State:
        """Apply one key event to the session and return the new state"""
        if session.done:
            return session.state

        if event.key is Key.ESCAPE or (event.key is Key.CHAR and event.char in CANCEL_CHARS):
            session.input_buffer = ""
            session.state = State.CANCELLED
        elif event.key is Key.ENTER:
            if not session.input_buffer.strip():
                logger.debug("Ignoring confirm on blank input")
            else:
                candidates = session.candidates
                if candidates:
                    session.selection = candidates[0].name
                    session.state = State.CONFIRMED
                else:
                    logger.debug("Ignoring confirm, no engine starts with %r", session.input_buffer)
        elif event.key is Key.CHAR:
            session.input_buffer += event.char
        elif event.key is Key.BACKSPACE:
            session.input_buffer = session.input_buffer[:-1]

        return session.state

    @staticmethod
    def screen(session: SelectionSession) -> list[str]:
        """Lines to draw for the current session"""
        names = [e.name for e in session.candidates]
        available = AVAILABLE_LABEL + " ".join(names) if names else ""
        return [session.input_buffer, available]

    def run(self, catalog: EngineCatalog) -> Optional[str]:
        """
        Run the picker until the user confirms or cancels.

        Returns:
            The selected engine name, or None when cancelled or input ended

        Raises:
            TerminalIOError: reading keys or drawing failed; the terminal
                mode is restored before the error propagates
        """
        session = SelectionSession(catalog)
        with self.terminal.session():
            try:
                self.terminal.render(self.screen(session))
                for event in self.terminal.read_keys():
                    if self.feed(session, event) is not State.EDITING:
                        break
                    self.terminal.render(self.screen(session))
                else:
                    # End of input
                    session.state = State.CANCELLED
                self.terminal.render([])
            except OSError as e:
                raise TerminalIOError(str(e)) from e

        if session.state is State.CONFIRMED:
            logger.debug("Selected engine %r", session.selection)
            return session.selection
        logger.debug("Selection cancelled")
        return None
