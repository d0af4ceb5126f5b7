"""
Editor host abstraction for the function header command.

This module defines the abstract EditorHost class describing everything the
command needs from a text editor: reading lines under a cursor, moving the
cursor, inserting text and reporting diagnostics. TextBufferHost implements it
over an in-memory list of lines so the command can run against plain files.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Cursor:
    """Line position inside a document (0-based line index)."""
    line: int = 0

    def copy(self) -> 'Cursor':
        return Cursor(self.line)


class OutputPane:
    """
    Diagnostic output pane.

    Collects every message written to it and forwards them to logging.
    """

    def __init__(self, name: str = 'Debug', log_level: int = logging.INFO):
        self.name = name
        self.log_level = log_level
        self.messages: List[str] = []
        self.activated = False
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for pane output."""
        logger = logging.getLogger('output_pane')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def output_string(self, message: str) -> None:
        self.messages.append(message)
        self.logger.log(self.log_level, f"[{self.name}] {message.rstrip()}")

    def activate(self) -> None:
        self.activated = True

    @property
    def text(self) -> str:
        return ''.join(self.messages)


class EditorHost(ABC):
    """
    Abstract base class for editors hosting the function header command.

    All methods are called from the UI thread (see ui_thread.UIThreadExecutor).
    """

    @abstractmethod
    def get_active_cursor(self) -> Optional[Cursor]:
        """
        Return the cursor of the active selection.

        Returns:
            Optional[Cursor]: Cursor on the selected line, None when there is
            no active document or no selection
        """
        pass

    @abstractmethod
    def get_line_text(self, cursor: Cursor) -> str:
        """
        Return the full text of the line under the cursor.

        Args:
            cursor: Cursor positioned on the line

        Returns:
            str: Line text without its line terminator
        """
        pass

    @abstractmethod
    def advance_cursor_one_line(self, cursor: Cursor) -> None:
        """
        Move the cursor down one line.

        The cursor never moves past the last line of the document.
        """
        pass

    @abstractmethod
    def is_at_end_of_document(self, cursor: Cursor) -> bool:
        """Return True when the cursor is on the last line of the document."""
        pass

    @abstractmethod
    def insert_text_at(self, point: Cursor, text: str) -> None:
        """
        Insert text at the start of the line referenced by point.

        Args:
            point: Insertion point created by create_insert_point
            text: Text to insert, normally terminated by a newline
        """
        pass

    @abstractmethod
    def get_output_pane(self) -> Optional[OutputPane]:
        """Return the diagnostic output pane, or None if unavailable."""
        pass

    def get_current_line_text(self, cursor: Cursor) -> str:
        return self.get_line_text(cursor)

    def create_insert_point(self, cursor: Cursor) -> Cursor:
        """Return an independent point at the start of the cursor's line."""
        return cursor.copy()

    def report_diagnostic(self, message: str) -> bool:
        """
        Write a diagnostic message to the output pane and show the pane.

        Returns:
            bool: False if the host has no output pane, True otherwise
        """
        pane = self.get_output_pane()
        if pane is None:
            return False

        pane.output_string(message)
        pane.activate()
        return True


class TextBufferHost(EditorHost):
    """
    In-memory editor host backed by a list of lines.

    Lines are stored without terminators; text() joins them with '\\n' and
    keeps a trailing newline when the source had one. newline records the
    line terminator of the source file so writers can restore it.
    """

    def __init__(self, lines: List[str], cursor_line: Optional[int] = 0,
                 output_pane: Optional[OutputPane] = None, trailing_newline: bool = True,
                 newline: str = '\n'):
        self.lines = list(lines) if lines else [""]
        self.trailing_newline = trailing_newline
        self.newline = newline
        self.output_pane = output_pane

        if cursor_line is None:
            self.cursor = None
        else:
            if cursor_line < 0 or cursor_line >= len(self.lines):
                raise ValueError(
                    f"Cursor line {cursor_line + 1} is outside the document (1-{len(self.lines)})"
                )
            self.cursor = Cursor(cursor_line)

    @classmethod
    def from_text(cls, text: str, cursor_line: Optional[int] = 0,
                  output_pane: Optional[OutputPane] = None) -> 'TextBufferHost':
        trailing_newline = text.endswith('\n')
        body = text[:-1] if trailing_newline else text
        return cls(body.split('\n'), cursor_line, output_pane, trailing_newline)

    @classmethod
    def from_file(cls, file_path: str, cursor_line: Optional[int] = 0,
                  output_pane: Optional[OutputPane] = None) -> 'TextBufferHost':
        with open(file_path, 'r', encoding='utf-8', newline='') as f:
            raw = f.read()
        host = cls.from_text(raw.replace('\r\n', '\n'), cursor_line, output_pane)
        host.newline = '\r\n' if '\r\n' in raw else '\n'
        return host

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def text(self) -> str:
        body = '\n'.join(self.lines)
        return body + '\n' if self.trailing_newline else body

    def move_to_line(self, line: int) -> Cursor:
        """Place the active cursor on a 0-based line and return it."""
        if line < 0 or line >= len(self.lines):
            raise ValueError(f"Line {line + 1} is outside the document (1-{len(self.lines)})")
        self.cursor = Cursor(line)
        return self.cursor

    def get_active_cursor(self) -> Optional[Cursor]:
        return self.cursor

    def get_line_text(self, cursor: Cursor) -> str:
        return self.lines[cursor.line]

    def advance_cursor_one_line(self, cursor: Cursor) -> None:
        if cursor.line < len(self.lines) - 1:
            cursor.line += 1

    def is_at_end_of_document(self, cursor: Cursor) -> bool:
        return cursor.line >= len(self.lines) - 1

    def insert_text_at(self, point: Cursor, text: str) -> None:
        new_lines = text.split('\n')
        # A terminating newline keeps the original line on its own row
        if new_lines and new_lines[-1] == "":
            new_lines.pop()
            self.lines[point.line:point.line] = new_lines
        else:
            self.lines[point.line:point.line + 1] = (
                new_lines[:-1] + [new_lines[-1] + self.lines[point.line]]
            )

    def get_output_pane(self) -> Optional[OutputPane]:
        return self.output_pane
