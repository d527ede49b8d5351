"""
Main entry point for the Folder Compare command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Running the comparison and printing the result
- Exit codes
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, TextIO

from folder_compare import (
    FolderComparer,
    FolderCompareError,
    FolderCompareResult,
    HashAlgorithm,
    __version__,
)
from folder_compare.core.folder.scanner import read_pattern_file
from folder_compare.services.settings import SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "folder-compare"
APP_VERSION = __version__

EXIT_IDENTICAL = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    base_path: str = ""
    target_path: str = ""
    exclude_patterns: list[str] = field(default_factory=list)
    exclude_files: list[str] = field(default_factory=list)
    hash_algorithm: Optional[HashAlgorithm] = None
    parallel_workers: Optional[int] = None
    follow_symlinks: bool = False
    strict: bool = False
    show_unchanged: bool = False
    json_output: bool = False
    config_file: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""
    
    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'
    
    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and stream.isatty()
    
    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        
        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"
        
        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.
    
    Console output goes to stderr so stdout carries only results.
    
    Args:
        level: Log level string
        log_file: Optional file path for logging
    
    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)
    
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)
    
    return root_logger


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.
    
    Args:
        args: Arguments to parse (defaults to sys.argv)
    
    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Recursively compare two folders and list new and changed files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old/ new/                        List new and changed files
  %(prog)s old/ new/ -e '\\.doc' -e '\\.txt'  Skip .doc and .txt files
  %(prog)s old/ new/ --exclude-from ignore.pat --json

Exit status is 0 if nothing is new or changed, 1 if differences
were found and 2 on error.
        """
    )
    
    parser.add_argument('base', help='Base folder')
    parser.add_argument('target', help='Target folder whose files are classified')
    
    # Filtering
    parser.add_argument(
        '-e', '--exclude',
        action='append',
        default=[],
        metavar='PATTERN',
        help='Regular expression; matching paths are skipped (repeatable)'
    )
    parser.add_argument(
        '-X', '--exclude-from',
        action='append',
        default=[],
        metavar='FILE',
        help='Read exclude patterns from FILE, one per line'
    )
    
    # Comparison options
    parser.add_argument(
        '--algorithm',
        choices=[a.value for a in HashAlgorithm],
        default=None,
        help='Fingerprint algorithm (default: xxh64)'
    )
    parser.add_argument(
        '-j', '--workers',
        type=int,
        default=None,
        help='Number of hashing threads'
    )
    parser.add_argument(
        '--follow-symlinks',
        action='store_true',
        help='Follow symbolic links'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail on unreadable entries instead of skipping them'
    )
    
    # Output
    parser.add_argument(
        '--show-unchanged',
        action='store_true',
        help='Also list unchanged files'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )
    
    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    
    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file'
    )
    
    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )
    
    parsed = parser.parse_args(args)
    
    result = CommandLineArgs(
        base_path=parsed.base,
        target_path=parsed.target,
        exclude_patterns=parsed.exclude,
        exclude_files=parsed.exclude_from,
        parallel_workers=parsed.workers,
        follow_symlinks=parsed.follow_symlinks,
        strict=parsed.strict,
        show_unchanged=parsed.show_unchanged,
        json_output=parsed.json,
        config_file=parsed.config,
        log_file=parsed.log_file,
    )
    
    if parsed.algorithm:
        result.hash_algorithm = HashAlgorithm.from_string(parsed.algorithm)
    
    result.log_level = 'DEBUG' if parsed.verbose else parsed.log_level
    
    return result


# =============================================================================
# Output
# =============================================================================

def print_result(
    result: FolderCompareResult,
    show_unchanged: bool = False,
    json_output: bool = False,
    stream: Optional[TextIO] = None
) -> None:
    """Print a comparison result as text or JSON."""
    stream = stream or sys.stdout
    
    if json_output:
        data = result.to_dict()
        if not show_unchanged:
            del data['unchanged_files']
        json.dump(data, stream, indent=2)
        stream.write('\n')
        return
    
    for rel_path in result.changed_files:
        stream.write(f"M {rel_path}\n")
    for rel_path in result.new_files:
        stream.write(f"A {rel_path}\n")
    if show_unchanged:
        for rel_path in result.unchanged_files:
            stream.write(f"= {rel_path}\n")


# =============================================================================
# Main Function
# =============================================================================

def run(args: CommandLineArgs) -> int:
    """
    Run a comparison for parsed arguments.
    
    Returns:
        Exit code
    """
    settings = SettingsManager(args.config_file).settings
    options = settings.to_compare_options()
    
    try:
        for pattern_file in args.exclude_files:
            options.exclude_patterns.extend(read_pattern_file(pattern_file))
    except OSError as e:
        logging.error(f"Cannot read exclude file: {e}")
        return EXIT_ERROR
    
    options.exclude_patterns.extend(args.exclude_patterns)
    if args.hash_algorithm is not None:
        options.hash_algorithm = args.hash_algorithm
    if args.parallel_workers is not None:
        options.parallel_workers = args.parallel_workers
    if args.follow_symlinks:
        options.follow_symlinks = True
    if args.strict:
        options.ignore_errors = False
    
    try:
        comparer = FolderComparer(options)
    except ValueError as e:
        logging.error(f"Invalid comparison options: {e}")
        return EXIT_ERROR
    
    try:
        result = comparer.compare(args.base_path, args.target_path)
    except FolderCompareError as e:
        logging.error(f"Comparison failed during {e.phase}: {e}")
        return EXIT_ERROR
    
    print_result(result, args.show_unchanged, args.json_output)
    
    return EXIT_IDENTICAL if result.is_identical else EXIT_DIFFERENCES


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.
    
    Returns:
        Exit code (0 when identical, 1 on differences, 2 on error)
    """
    args = parse_arguments(argv)
    
    log_file = Path(args.log_file) if args.log_file else None
    logger = setup_logging(args.log_level, log_file)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")
    
    return run(args)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
