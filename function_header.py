"""
Function Header Command
=======================
Command handler that inserts a documentation header above the function
signature under the editor cursor.

Flow for one invocation:
1. Read the line under the cursor and try a direct signature match
2. If that fails but the line looks like the start of a signature, accumulate
   the following lines until the parentheses balance and match again
3. If nothing matched, echo the line to the host's output pane

Exactly one command instance is live per host session. It is created by
FunctionHeaderCommand.initialize() and released by FunctionHeaderCommand.shutdown().
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Optional

from editor_host import Cursor, EditorHost
from header_generator import HeaderGenerator
from multiline_accumulator import MultiLineAccumulator
from signature_matcher import SignatureMatcher
from ui_thread import UIThreadExecutor


NOT_A_SIGNATURE_MESSAGE = "The following line is not a function signature:\n\t{0}\n"


@dataclass
class HeaderInsertionResult:
    """Outcome of a single command invocation."""
    status: str  # 'inserted', 'no_match', 'aborted'
    line: str = ""
    header: Optional[str] = None
    accumulated_text: Optional[str] = None
    lines_consumed: int = 0
    diagnostic: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == 'inserted'


class FunctionHeaderCommand:
    """
    Function header command handler.

    The command is stateless between invocations: every call to execute()
    re-reads its input from the host.
    """

    COMMAND_ID = 0x0100
    COMMAND_SET = uuid.UUID("38dfd4d0-7b42-4360-a7f0-2095537a05e2")

    _instance: Optional['FunctionHeaderCommand'] = None
    _instance_lock = threading.Lock()

    def __init__(self, executor: UIThreadExecutor,
                 matcher: Optional[SignatureMatcher] = None,
                 generator: Optional[HeaderGenerator] = None):
        """
        Initialize the command.

        Args:
            executor: UI thread executor used for every host access
            matcher: Signature matcher, a default instance if None
            generator: Header generator, a default instance if None
        """
        if executor is None:
            raise ValueError("executor must not be None")

        self.executor = executor
        self.matcher = matcher or SignatureMatcher()
        self.generator = generator or HeaderGenerator()
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for command execution."""
        logger = logging.getLogger('function_header')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    # ----- singleton lifecycle -----

    @classmethod
    def initialize(cls, executor: Optional[UIThreadExecutor] = None) -> 'FunctionHeaderCommand':
        """
        Create the single live command registration for this host session.

        Calling initialize() again while an instance is live returns that
        instance unchanged.

        Args:
            executor: UI thread executor, a new one is started if None

        Returns:
            The live FunctionHeaderCommand
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(executor or UIThreadExecutor())
                logging.getLogger('function_header').debug(
                    f"Registered command {cls.COMMAND_SET}:{cls.COMMAND_ID:#06x}"
                )
            return cls._instance

    @classmethod
    def instance(cls) -> Optional['FunctionHeaderCommand']:
        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Release the live registration and stop its UI thread."""
        with cls._instance_lock:
            command = cls._instance
            cls._instance = None

        if command is not None:
            command.executor.shutdown()

    # ----- command body -----

    def validate_and_insert(self, host: EditorHost, text: str, insert_point: Cursor) -> Optional[str]:
        """
        Insert a header for text if it is a function signature.

        Args:
            host: Editor host receiving the header
            text: Line (or accumulated lines) to check
            insert_point: Point in the document to insert the header block

        Returns:
            The inserted header text, or None if text is not a signature
        """
        self.executor.throw_if_not_on_ui_thread()

        match = self.matcher.match(text)
        if match is None:
            return None

        block = self.generator.generate(match)
        header = block.to_text()
        host.insert_text_at(insert_point, header)
        self.logger.info(
            f"Inserted header for {match.owner_name}::{match.function_name} "
            f"at line {insert_point.line + 1} "
            f"({block.param_count} param(s), return: {'yes' if block.has_return else 'no'})"
        )
        return header

    def execute(self, host: EditorHost) -> HeaderInsertionResult:
        """Run the command against the host's active cursor on the UI thread."""
        return self.executor.run(self._execute, host)

    def _execute(self, host: EditorHost) -> HeaderInsertionResult:
        cursor = host.get_active_cursor()
        if cursor is None:
            self.logger.debug("No active document or selection, nothing to do")
            return HeaderInsertionResult(status='aborted')

        # Work on a copy so the host selection is left where the user put it
        cursor = cursor.copy()
        insert_point = host.create_insert_point(cursor)
        line = host.get_current_line_text(cursor)

        header = self.validate_and_insert(host, line, insert_point)
        if header is not None:
            return HeaderInsertionResult(status='inserted', line=line, header=header)

        # The signature may be spread across multiple lines
        if self.matcher.matches_partial_start(line):
            state = MultiLineAccumulator(host).accumulate(line, cursor)
            header = self.validate_and_insert(host, state.accumulated_text, insert_point)
            if header is not None:
                return HeaderInsertionResult(
                    status='inserted',
                    line=line,
                    header=header,
                    accumulated_text=state.accumulated_text,
                    lines_consumed=state.lines_consumed
                )

        message = NOT_A_SIGNATURE_MESSAGE.format(line)
        if not host.report_diagnostic(message):
            return HeaderInsertionResult(status='no_match', line=line)

        self.logger.debug(f"Not a function signature: {line}")
        return HeaderInsertionResult(status='no_match', line=line, diagnostic=message)
