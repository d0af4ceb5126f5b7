"""
Multi-line Signature Accumulator
================================
Rebuilds a signature that is wrapped across several physical lines by
concatenating the following lines onto the starting line until the
parentheses balance or the document ends.
"""

import logging
from dataclasses import dataclass

from editor_host import Cursor, EditorHost


def paren_difference(text: str) -> int:
    """Count of opening minus closing parentheses in text."""
    return text.count('(') - text.count(')')


@dataclass
class AccumulationState:
    """Working state of one accumulation pass."""
    accumulated_text: str
    paren_balance: int
    cursor: Cursor
    lines_consumed: int = 0


class MultiLineAccumulator:
    """
    Extends a partial signature downward through the host document.

    Lines consumed past the true end of the signature are not given back;
    the caller always inserts at the original start line.
    """

    def __init__(self, host: EditorHost):
        self.host = host
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for line accumulation."""
        logger = logging.getLogger('multiline_accumulator')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def accumulate(self, start_line: str, cursor: Cursor) -> AccumulationState:
        """
        Concatenate lines below the start line until the signature closes.

        Args:
            start_line: Full text of the starting line
            cursor: Cursor on the starting line, advanced in place

        Returns:
            Final AccumulationState
        """
        state = AccumulationState(
            accumulated_text=start_line,
            paren_balance=paren_difference(start_line),
            cursor=cursor
        )

        while True:
            # Move down the document concatenating the lines onto the starting line
            self.host.advance_cursor_one_line(state.cursor)
            next_line = self.host.get_line_text(state.cursor).strip()
            state.accumulated_text += next_line
            state.paren_balance += paren_difference(next_line)
            state.lines_consumed += 1

            # Balanced, or more closing than opening parentheses
            if state.paren_balance <= 0:
                break

            if self.host.is_at_end_of_document(state.cursor):
                break

        self.logger.debug(
            f"Accumulated {state.lines_consumed} line(s), balance {state.paren_balance}: "
            f"{state.accumulated_text}"
        )
        return state
