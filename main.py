"""
Main Entry Point for the Function Header Tool
=============================================
Command-line host for the function header command. Each subcommand opens a
source file in an in-memory editor buffer, runs the command with the cursor
on the requested line(s), and writes the result next to the original (or in
place when configured).

SAFETY FEATURES:
- Inserted headers are the only permitted change; every write is validated
- Backups before in-place writes
- Atomic file writes
"""

import click
import logging
import sys
from pathlib import Path
from typing import Optional

from config import ConfigManager
from editor_host import OutputPane, TextBufferHost
from file_scanner import CodeFileScanner, commented_output_path
from function_header import FunctionHeaderCommand
from signature_matcher import SignatureMatcher
from source_annotator import SourceAnnotator
from utils import create_backup_file, format_file_size, safe_file_write

# Version info
__version__ = "1.0.0"

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Setup logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Component loggers carry their own handlers; keep them at the chosen level
    for name in ('config', 'file_scanner', 'function_header', 'signature_matcher',
                 'multiline_accumulator', 'source_annotator', 'code_validator',
                 'output_pane', 'utils'):
        logging.getLogger(name).setLevel(numeric_level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not setup file logging: {e}", err=True)


def run_command(host: TextBufferHost):
    """Run the function header command once, with a fresh registration."""
    command = FunctionHeaderCommand.initialize()
    try:
        return command.execute(host)
    finally:
        FunctionHeaderCommand.shutdown()


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.pass_context
def cli(ctx, version):
    """
    Function Header Tool

    Inserts Doxygen-style documentation headers above C++ member function
    signatures of the form 'Type Owner::Name(params)'.
    """
    if version:
        click.echo(f"Function Header Tool v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--file', '-f', 'file_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Source file containing the signature')
@click.option('--line', '-l', required=True, type=click.IntRange(min=1),
              help='1-based line number of the signature (first line if wrapped)')
@click.option('--config', '-c', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file path (default: config.json)')
@click.option('--in-place', is_flag=True, help='Write the header into the source file itself')
@click.option('--dry-run', is_flag=True, help='Print the header without writing any file')
@click.option('--log-level', type=click.Choice(LOG_LEVELS), default='WARNING',
              help='Logging level')
def insert(file_path, line, config, in_place, dry_run, log_level):
    """Insert a header above the function signature on LINE of FILE."""
    try:
        config_manager = ConfigManager(str(config) if config else None)
        setup_logging(log_level, config_manager.get('logging.log_file'))

        pane = OutputPane()
        host = TextBufferHost.from_file(str(file_path), cursor_line=line - 1, output_pane=pane)
        original = host.text()

        result = run_command(host)

        if not result.success:
            click.echo(pane.text.rstrip('\n') or f"Line {line} is not a function signature")
            sys.exit(1)

        click.echo(result.header, nl=False)
        if result.accumulated_text:
            click.echo(f"(signature spans {result.lines_consumed + 1} lines)")

        if dry_run:
            return

        if in_place or config_manager.get('processing.in_place', False):
            output_path = file_path
            if config_manager.get('processing.create_backups', True):
                backup = create_backup_file(str(file_path), config_manager.get('safety.backup_suffix', '_backup'))
                if backup is None:
                    click.echo("❌ Could not create backup, file left untouched")
                    sys.exit(1)
        else:
            output_path = commented_output_path(
                file_path, config_manager.get('processing.output_suffix', '_commented')
            )

        validate_against = original if config_manager.get('safety.validate_before_save', True) else None
        if not safe_file_write(str(output_path), host.text(), validate_against=validate_against,
                               newline=host.newline):
            click.echo(f"❌ Failed to write {output_path}")
            sys.exit(1)

        click.echo(f"✅ Header written to {output_path}")

    except (OSError, ValueError) as e:
        click.echo(f"❌ Insert failed: {e}")
        sys.exit(1)


@cli.command()
@click.argument('signature')
def check(signature):
    """
    Classify SIGNATURE text and print the header it would receive.

    Use a literal '\\n' to separate the physical lines of a wrapped signature.
    """
    pane = OutputPane()
    host = TextBufferHost.from_text(signature.replace('\\n', '\n'), cursor_line=0, output_pane=pane)

    result = run_command(host)
    if result.success:
        click.echo(result.header, nl=False)
    else:
        click.echo(pane.text.rstrip('\n'))
        sys.exit(1)


@cli.command()
@click.option('--root', '-r', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Root directory containing source files to annotate')
@click.option('--config', '-c', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file path (default: config.json)')
@click.option('--dry-run', is_flag=True, help='Count headers without writing files')
@click.option('--max-files', type=int, help='Maximum number of files to process (for testing)')
@click.option('--log-level', type=click.Choice(LOG_LEVELS), default='INFO', help='Logging level')
def annotate(root, config, dry_run, max_files, log_level):
    """
    Insert headers above every undocumented signature under ROOT.

    Commented copies are saved beside the originals with the configured suffix
    unless processing.in_place is set.
    """
    try:
        config_manager = ConfigManager(str(config) if config else None)
        setup_logging(log_level, config_manager.get('logging.log_file') if not dry_run else None)

        logger = logging.getLogger(__name__)
        logger.info(f"Starting Function Header Tool v{__version__}")
        logger.info(f"Mode: {'DRY RUN' if dry_run else 'PROCESSING'}")

        scanner = CodeFileScanner.from_config(str(root), config_manager)
        code_files = scanner.scan_code_files()

        if not code_files:
            click.echo("❌ No source files found in the specified directory.")
            return

        if max_files and max_files > 0:
            code_files = code_files[:max_files]
            click.echo(f"⚠️  Limited to first {max_files} files")

        command = FunctionHeaderCommand.initialize()
        annotator = SourceAnnotator(command, config_manager)
        counts = {'success': 0, 'unchanged': 0, 'failed': 0}
        headers = 0

        try:
            for file_info in code_files:
                result = annotator.annotate_file(file_info, dry_run=dry_run)
                counts[result.status] += 1
                headers += result.headers_inserted

                if result.status == 'failed':
                    click.echo(f"❌ {file_info['relative_path']}: {result.error_message}")
                elif result.status == 'success':
                    click.echo(f"✅ {file_info['relative_path']}: {result.headers_inserted} header(s)")
        except KeyboardInterrupt:
            click.echo("\n⚠️  Processing interrupted by user")
        finally:
            FunctionHeaderCommand.shutdown()

        click.echo("\n" + "="*60)
        click.echo(f"{'Would insert' if dry_run else 'Inserted'} {headers} header(s) "
                   f"in {counts['success']} file(s)")
        click.echo(f"Unchanged: {counts['unchanged']}  Failed: {counts['failed']}")

        if counts['failed']:
            sys.exit(1)

    except OSError as e:
        click.echo(f"❌ Fatal error: {e}")
        sys.exit(1)


@cli.command()
@click.option('--root', '-r', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Root directory to analyze')
@click.option('--config', '-c', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file path (default: config.json)')
def analyze(root, config):
    """Report source files and signature candidates without changing anything."""
    try:
        config_manager = ConfigManager(str(config) if config else None)
        scanner = CodeFileScanner.from_config(str(root), config_manager)
        code_files = scanner.scan_code_files()
        scanner.print_scan_report(code_files)

        if not code_files:
            click.echo("\n❌ No source files found for analysis.")
            return

        matcher = SignatureMatcher()
        signatures = 0
        wrapped = 0

        for file_info in code_files:
            for line in TextBufferHost.from_file(file_info['full_path']).lines:
                if matcher.match(line) is not None:
                    signatures += 1
                elif matcher.matches_partial_start(line):
                    wrapped += 1

        total_size = sum(f.get('file_size', 0) for f in code_files)
        click.echo(f"\n📊 DETAILED ANALYSIS")
        click.echo(f"Total files: {len(code_files)}")
        click.echo(f"Total size: {format_file_size(total_size)}")
        click.echo(f"Single-line signatures: {signatures}")
        click.echo(f"Possible wrapped signatures: {wrapped}")

    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"❌ Analysis failed: {e}")
        sys.exit(1)


@cli.command()
@click.option('--config', '-c', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file path (default: config.json)')
def show_config(config):
    """Show current configuration settings."""
    try:
        config_manager = ConfigManager(str(config) if config else None)
        config_manager.print_config_summary()
    except OSError as e:
        click.echo(f"❌ Failed to load configuration: {e}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
