"""
Utility Functions for Code Preservation
=======================================
Helpers that guarantee annotated output differs from the original source
only by inserted function header blocks, plus backup and atomic write
helpers used before any file is touched.
"""

import hashlib
import logging
from pathlib import Path
from typing import List, Tuple, Optional

from header_generator import HEADER_OPEN, HEADER_CLOSE


class CodePreservationValidator:
    """
    Validates that annotation only added header blocks.

    A header block runs from the opening fence line to the next closing
    fence line, inclusive. Everything else must be identical and in order.
    """

    def __init__(self):
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for validation operations."""
        logger = logging.getLogger('code_validator')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def extract_code_lines(self, content: str) -> List[str]:
        """
        Return the lines of content with header blocks removed.

        Args:
            content: Source file content

        Returns:
            List of remaining lines, in order
        """
        code_lines = []
        in_header = False

        for line in content.split('\n'):
            if in_header:
                if line == HEADER_CLOSE:
                    in_header = False
                continue
            if line == HEADER_OPEN:
                in_header = True
                continue
            code_lines.append(line)

        return code_lines

    def calculate_code_hash(self, content: str) -> str:
        """SHA-256 of the content with header blocks removed."""
        code_text = '\n'.join(self.extract_code_lines(content))
        return hashlib.sha256(code_text.encode('utf-8')).hexdigest()

    def validate_code_preservation(self, original_content: str, commented_content: str) -> Tuple[bool, List[str]]:
        """
        Ensure the original code is completely preserved.

        Args:
            original_content: The original file content
            commented_content: The content after header insertion

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        original_code_lines = self.extract_code_lines(original_content)
        commented_code_lines = self.extract_code_lines(commented_content)

        if self.calculate_code_hash(original_content) != self.calculate_code_hash(commented_content):
            errors.append("CODE HASH MISMATCH: Original and commented versions have different code content")

        if len(original_code_lines) != len(commented_code_lines):
            errors.append(
                f"CODE LINE COUNT MISMATCH: Original has {len(original_code_lines)} code lines, "
                f"commented has {len(commented_code_lines)}"
            )

        for i, (orig_line, comm_line) in enumerate(zip(original_code_lines, commented_code_lines)):
            if orig_line != comm_line:
                errors.append(f"CODE MODIFICATION DETECTED at code line {i+1}:")
                errors.append(f"  Original: '{orig_line}'")
                errors.append(f"  Modified: '{comm_line}'")
                break

        is_valid = len(errors) == 0

        if is_valid:
            self.logger.debug("Code preservation validation PASSED")
        else:
            self.logger.critical("Code preservation validation FAILED - original code has been modified")
            for error in errors:
                self.logger.critical(f"  {error}")

        return is_valid, errors


def create_backup_file(source_path: str, backup_suffix: str = "_backup") -> Optional[str]:
    """
    Create a backup copy of a file before processing.

    Args:
        source_path: Path to the source file
        backup_suffix: Suffix to add to backup filename

    Returns:
        Path to backup file if successful, None if failed
    """
    try:
        source_path_obj = Path(source_path)
        backup_path = source_path_obj.with_name(
            f"{source_path_obj.stem}{backup_suffix}{source_path_obj.suffix}"
        )
        backup_path.write_bytes(source_path_obj.read_bytes())
        return str(backup_path)

    except OSError as e:
        logging.getLogger('utils').error(f"Failed to create backup for {source_path}: {e}")
        return None


def safe_file_write(file_path: str, content: str, validate_against: Optional[str] = None,
                    newline: str = '\n') -> bool:
    """
    Safely write content to a file with optional validation.

    Args:
        file_path: Path where to write the file
        content: Content to write
        validate_against: Optional original content for validation
        newline: Line terminator written for each '\\n' in content

    Returns:
        True if write was successful and validation passed, False otherwise
    """
    logger = logging.getLogger('utils')

    if validate_against is not None:
        validator = CodePreservationValidator()
        is_valid, errors = validator.validate_code_preservation(validate_against, content)

        if not is_valid:
            logger.critical(f"REFUSING TO WRITE {file_path}: code preservation validation failed")
            return False

    file_path_obj = Path(file_path)
    temp_path = file_path_obj.with_suffix(file_path_obj.suffix + '.tmp')

    try:
        # Write to a temp file, then replace the target
        with open(temp_path, 'w', encoding='utf-8', newline=newline) as f:
            f.write(content)
        temp_path.replace(file_path_obj)

    except OSError as e:
        logger.error(f"Failed to write file {file_path}: {e}")
        return False

    logger.info(f"Successfully wrote file: {file_path}")
    return True


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB"]
    i = 0
    size = float(size_bytes)

    while size >= 1024.0 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"
