"""
Recursive folder comparison.

Walks a base and a target directory, skips paths matching any of a set
of exclude patterns, and reports which target files are new and which
have changed content.
"""

from folder_compare.core.errors import (
    FolderCompareError,
    PatternCompileError,
    RootNotFoundError,
    RootNotADirectoryError,
    EntryReadError,
    FileReadError,
)
from folder_compare.core.models import FileStatus, FolderCompareResult, ScanResult
from folder_compare.core.folder import (
    CompareOptions,
    FolderComparer,
    FolderScanner,
    PatternMatcher,
    ScanOptions,
    compare,
)
from folder_compare.services.hashing import HashAlgorithm, HashingService

__version__ = "1.0.0"

__all__ = [
    'compare',
    'FolderComparer',
    'CompareOptions',
    'FolderScanner',
    'ScanOptions',
    'PatternMatcher',
    'HashAlgorithm',
    'HashingService',
    'FileStatus',
    'FolderCompareResult',
    'ScanResult',
    'FolderCompareError',
    'PatternCompileError',
    'RootNotFoundError',
    'RootNotADirectoryError',
    'EntryReadError',
    'FileReadError',
]
