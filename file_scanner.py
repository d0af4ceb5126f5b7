"""
Source File Scanner Module
==========================
Recursively scans directories for C/C++ source files whose function
signatures can receive documentation headers.

Extensions and skip patterns come from the 'processing' section of the
configuration. Skip patterns ending in '/' exclude whole folders; wildcard
patterns use fnmatch; anything else is a filename substring.
"""

import os
import fnmatch
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional


DEFAULT_EXTENSIONS = ['.cpp', '.cc', '.cxx', '.c', '.h', '.hpp', '.inl']
DEFAULT_SKIP_PATTERNS = ['_commented', '_backup']


def commented_output_path(file_path: Path, suffix: str = "_commented") -> Path:
    """Path of the commented copy written next to the original file."""
    return file_path.with_name(f"{file_path.stem}{suffix}{file_path.suffix}")


class CodeFileScanner:
    """Recursive source file discovery driven by extension and skip rules."""

    def __init__(self, root_directory: str,
                 file_extensions: Optional[Iterable[str]] = None,
                 skip_patterns: Optional[Iterable[str]] = None,
                 output_suffix: str = "_commented"):
        """
        Initialize the code file scanner.

        Args:
            root_directory: Root directory to scan for source files
            file_extensions: Extensions to include (with the dot)
            skip_patterns: File and folder patterns to exclude
            output_suffix: Suffix used for commented copies
        """
        self.root_directory = Path(root_directory).resolve()
        self.file_extensions = set(
            ext.lower() for ext in (file_extensions if file_extensions is not None else DEFAULT_EXTENSIONS)
        )
        self.skip_patterns = list(skip_patterns if skip_patterns is not None else DEFAULT_SKIP_PATTERNS)
        self.output_suffix = output_suffix
        self.logger = self._setup_logger()

    @classmethod
    def from_config(cls, root_directory: str, config_manager) -> 'CodeFileScanner':
        return cls(
            root_directory,
            file_extensions=config_manager.get('processing.file_extensions', DEFAULT_EXTENSIONS),
            skip_patterns=config_manager.get('processing.skip_patterns', DEFAULT_SKIP_PATTERNS),
            output_suffix=config_manager.get('processing.output_suffix', '_commented')
        )

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for file scanner operations."""
        logger = logging.getLogger('file_scanner')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def should_skip_file(self, filename: str) -> bool:
        """
        Check if a file should be skipped based on naming patterns.

        Args:
            filename: Name of the file to check

        Returns:
            True if file should be skipped, False otherwise
        """
        for pattern in self.skip_patterns:
            if pattern.endswith('/'):
                continue
            if '*' in pattern:
                if fnmatch.fnmatch(filename, pattern):
                    return True
            elif pattern in filename:
                return True

        return False

    def should_skip_folder(self, folder_name: str) -> bool:
        """Check if a folder is excluded by a pattern ending in '/'."""
        for pattern in self.skip_patterns:
            if pattern.endswith('/') and folder_name == pattern.rstrip('/'):
                return True
        return False

    def is_code_file(self, filename: str) -> bool:
        return Path(filename).suffix.lower() in self.file_extensions

    def scan_code_files(self) -> List[Dict[str, str]]:
        """
        Recursively scan for source files in the root directory.

        Returns:
            List of dictionaries containing file information:
            - full_path: Absolute path to the file
            - relative_path: Path relative to root directory
            - directory: Directory containing the file
            - filename: Name of the file
            - output_path: Path where the commented version would be saved
            - file_size: Size of the file in bytes
        """
        code_files = []

        if not self.root_directory.is_dir():
            self.logger.error(f"Root path is not a directory: {self.root_directory}")
            return code_files

        self.logger.info(f"Scanning source files in: {self.root_directory}")

        for root, dirs, files in os.walk(self.root_directory):
            root_path = Path(root)

            # Prune excluded folders in-place so os.walk does not descend
            dirs[:] = sorted(d for d in dirs if not self.should_skip_folder(d))

            for filename in sorted(files):
                if not self.is_code_file(filename) or self.should_skip_file(filename):
                    continue

                file_path = root_path / filename
                try:
                    file_size = file_path.stat().st_size
                except OSError as e:
                    self.logger.warning(f"Could not stat {file_path}: {e}")
                    continue

                code_files.append({
                    'full_path': str(file_path),
                    'relative_path': str(file_path.relative_to(self.root_directory)),
                    'directory': str(root_path),
                    'filename': filename,
                    'output_path': str(commented_output_path(file_path, self.output_suffix)),
                    'file_size': file_size
                })

        self.logger.info(f"Found {len(code_files)} source files")
        return code_files

    def print_scan_report(self, code_files: List[Dict[str, str]]) -> None:
        """Print a summary of the scan grouped by directory."""
        print("\n" + "="*60)
        print("SOURCE FILE SCAN REPORT")
        print("="*60)
        print(f"Root Directory: {self.root_directory}")
        print(f"Total Files: {len(code_files)}")

        by_directory: Dict[str, int] = {}
        for file_info in code_files:
            relative_dir = str(Path(file_info['relative_path']).parent)
            by_directory[relative_dir] = by_directory.get(relative_dir, 0) + 1

        for directory, count in sorted(by_directory.items()):
            print(f"  {directory}: {count} file(s)")

        print("="*60)
