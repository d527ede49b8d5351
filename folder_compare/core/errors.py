"""
Error types raised by the folder comparison engine.

Every error records the phase it was raised in (pattern compilation,
traversal or hashing) and the path or pattern that caused it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FolderCompareError(Exception):
    """Base class for all comparison errors."""
    phase: str = "compare"
    
    def __init__(self, message: str, path: Optional[Path | str] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class PatternCompileError(FolderCompareError):
    """An exclusion pattern is not a valid regular expression."""
    phase = "pattern"
    
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid exclude pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class RootNotFoundError(FolderCompareError, FileNotFoundError):
    """A root directory passed to compare does not exist."""
    phase = "traversal"
    
    def __init__(self, path: Path | str):
        super().__init__(f"Directory not found: {path}", path)


class RootNotADirectoryError(FolderCompareError, NotADirectoryError):
    """A root path passed to compare exists but is not a directory."""
    phase = "traversal"
    
    def __init__(self, path: Path | str):
        super().__init__(f"Not a directory: {path}", path)


class EntryReadError(FolderCompareError):
    """An entry became unreadable during a strict traversal."""
    phase = "traversal"
    
    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"Cannot read entry {path}: {reason}", path)
        self.reason = reason


class FileReadError(FolderCompareError):
    """A file selected for hashing could not be fully read."""
    phase = "hashing"
    
    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"Cannot read file {path}: {reason}", path)
        self.reason = reason
