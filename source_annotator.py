"""
Source Annotator Module
=======================
Applies the function header command to every signature line of a source file.

Candidate lines are visited from the bottom of the file upwards so that a
header inserted for one signature never shifts the line numbers of the
signatures still to be visited. Lines directly below an existing comment
close ('*/') are treated as already documented and left alone.

CRITICAL: the annotated text is validated against the original before any
file is written; headers are the only permitted difference.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from editor_host import OutputPane, TextBufferHost
from file_scanner import commented_output_path
from function_header import FunctionHeaderCommand
from utils import create_backup_file, safe_file_write


@dataclass
class AnnotationReport:
    """Result of annotating one block of text."""
    text: str
    candidates: int = 0
    headers_inserted: int = 0
    misses: List[str] = field(default_factory=list)


@dataclass
class FileAnnotationResult:
    """Result of annotating a single file."""
    file_path: str
    status: str  # 'success', 'unchanged', 'failed'
    headers_inserted: int = 0
    output_path: Optional[str] = None
    error_message: Optional[str] = None


class SourceAnnotator:
    """Runs FunctionHeaderCommand over whole files."""

    def __init__(self, command: FunctionHeaderCommand, config_manager=None):
        """
        Initialize the annotator.

        Args:
            command: Live function header command
            config_manager: Optional ConfigManager for output and safety settings
        """
        self.command = command
        self.config_manager = config_manager
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for annotation operations."""
        logger = logging.getLogger('source_annotator')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _setting(self, key_path: str, default):
        if self.config_manager is None:
            return default
        return self.config_manager.get(key_path, default)

    @staticmethod
    def is_documented(lines: List[str], index: int) -> bool:
        """True when the line above index closes a block comment."""
        return index > 0 and lines[index - 1].rstrip().endswith('*/')

    def find_candidates(self, lines: List[str]) -> List[int]:
        """Indices of undocumented lines that match or start a signature."""
        matcher = self.command.matcher
        candidates = []

        for index, line in enumerate(lines):
            if self.is_documented(lines, index):
                continue
            if matcher.match(line) is not None or matcher.matches_partial_start(line):
                candidates.append(index)

        return candidates

    def annotate_text(self, text: str) -> AnnotationReport:
        """
        Insert headers above every signature in text.

        Args:
            text: Full source text

        Returns:
            AnnotationReport with the annotated text
        """
        pane = OutputPane('Annotator', log_level=logging.DEBUG)
        host = TextBufferHost.from_text(text, cursor_line=0, output_pane=pane)
        candidates = self.find_candidates(host.lines)
        report = AnnotationReport(text=text, candidates=len(candidates))

        for index in reversed(candidates):
            host.move_to_line(index)
            result = self.command.execute(host)
            if result.success:
                report.headers_inserted += 1
            else:
                report.misses.append(result.line)

        report.text = host.text()
        return report

    def annotate_file(self, file_info: Dict[str, str], dry_run: bool = False) -> FileAnnotationResult:
        """
        Annotate one scanned file and write the result.

        Args:
            file_info: Entry produced by CodeFileScanner.scan_code_files
            dry_run: Count headers without writing anything

        Returns:
            FileAnnotationResult describing what happened
        """
        file_path = file_info['full_path']

        try:
            source = TextBufferHost.from_file(file_path)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Could not read {file_path}: {e}")
            return FileAnnotationResult(file_path=file_path, status='failed', error_message=str(e))

        original = source.text()
        report = self.annotate_text(original)

        if report.headers_inserted == 0:
            return FileAnnotationResult(file_path=file_path, status='unchanged')

        in_place = self._setting('processing.in_place', False)
        if in_place:
            output_path = file_path
        else:
            output_path = file_info.get('output_path') or str(commented_output_path(
                Path(file_path), self._setting('processing.output_suffix', '_commented')
            ))

        if dry_run:
            return FileAnnotationResult(
                file_path=file_path,
                status='success',
                headers_inserted=report.headers_inserted,
                output_path=output_path
            )

        if in_place and self._setting('processing.create_backups', True):
            backup = create_backup_file(file_path, self._setting('safety.backup_suffix', '_backup'))
            if backup is None:
                return FileAnnotationResult(
                    file_path=file_path,
                    status='failed',
                    error_message="Could not create backup before in-place write"
                )

        validate_against = original if self._setting('safety.validate_before_save', True) else None
        if not safe_file_write(output_path, report.text, validate_against=validate_against,
                               newline=source.newline):
            return FileAnnotationResult(
                file_path=file_path,
                status='failed',
                headers_inserted=report.headers_inserted,
                error_message=f"Failed to write {output_path}"
            )

        self.logger.info(f"Inserted {report.headers_inserted} header(s) into {output_path}")
        return FileAnnotationResult(
            file_path=file_path,
            status='success',
            headers_inserted=report.headers_inserted,
            output_path=output_path
        )
