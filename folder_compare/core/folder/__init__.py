"""
Folder comparison module.

Provides functionality for:
- Recursive directory scanning
- Regular expression exclusion filtering
- Base-to-target folder comparison by content fingerprint
"""

from folder_compare.core.folder.scanner import (
    FolderScanner,
    ScanOptions,
    PatternMatcher,
    read_pattern_file,
)
from folder_compare.core.folder.comparer import (
    FolderComparer,
    CompareOptions,
    compare,
)

__all__ = [
    # Scanner
    'FolderScanner',
    'ScanOptions',
    'PatternMatcher',
    'read_pattern_file',
    # Comparer
    'FolderComparer',
    'CompareOptions',
    'compare',
]
