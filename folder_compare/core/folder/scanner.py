"""
Directory scanner for folder comparison.

Provides directory traversal with:
- Recursive scanning of regular files
- Regular expression based exclusion
- Symlink handling
- Error resilience

Exclude patterns are searched in the full absolute path of each
entry, written with forward slashes on every platform. Roots are made
absolute but symlinks in them are not resolved. A directory
whose path matches is pruned together with everything below it.
"""

from __future__ import annotations

import logging
import os
import re
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence

from folder_compare.core.errors import (
    EntryReadError,
    PatternCompileError,
    RootNotADirectoryError,
    RootNotFoundError,
)
from folder_compare.core.models import ScanResult


@dataclass
class ScanOptions:
    """Options for directory scanning."""
    follow_symlinks: bool = False
    
    # Regular expressions, matched against the full path
    exclude_patterns: list[str] = field(default_factory=list)
    
    # Error handling: skip unreadable entries instead of failing
    ignore_errors: bool = True


class PatternMatcher:
    """
    Regular expression exclusion matcher.
    
    A path is excluded when any pattern is found anywhere in it.
    Patterns are unanchored, so a plain string such as ``.txt`` acts
    as a substring test (with ``.`` matching any character).
    """
    
    def __init__(self, patterns: Sequence[str]):
        self._patterns: tuple[str, ...] = tuple(patterns)
        self._compiled: list[re.Pattern] = []
        
        for pattern in self._patterns:
            try:
                self._compiled.append(re.compile(pattern))
            except re.error as e:
                logging.error(f"PatternMatcher - Invalid pattern {pattern!r}: {e}")
                raise PatternCompileError(pattern, str(e)) from e
    
    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns
    
    def __bool__(self) -> bool:
        return bool(self._compiled)
    
    def __len__(self) -> int:
        return len(self._compiled)
    
    def matches(self, path: str | Path) -> bool:
        """
        Check if a path matches any pattern.
        
        Returns True if the path should be excluded.
        """
        path = str(path).replace(os.sep, '/')
        return any(pattern.search(path) for pattern in self._compiled)
    
    @classmethod
    def from_file(cls, pattern_file: Path | str) -> 'PatternMatcher':
        """Create a matcher from a file holding one pattern per line."""
        return cls(read_pattern_file(pattern_file))


def read_pattern_file(pattern_file: Path | str) -> list[str]:
    """Read patterns from a file, skipping blank lines and # comments."""
    patterns = []
    with open(pattern_file, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip('\r\n')
            if line.strip() and not line.lstrip().startswith('#'):
                patterns.append(line)
    return patterns


class FolderScanner:
    """
    Scans a directory tree for regular files.
    
    The scanner never raises for entries that vanish or become
    unreadable while walking unless ``ignore_errors`` is disabled;
    skipped entries are logged and listed in ``ScanResult.errors``.
    """
    
    def __init__(
        self,
        options: Optional[ScanOptions] = None,
        matcher: Optional[PatternMatcher] = None
    ):
        self.options = options or ScanOptions()
        if matcher is None:
            matcher = PatternMatcher(self.options.exclude_patterns)
        self.matcher = matcher
    
    def scan(self, root_path: Path | str) -> ScanResult:
        """
        Scan a directory tree.
        
        Args:
            root_path: Root directory to scan
        
        Returns:
            ScanResult mapping relative paths to absolute paths
        
        Raises:
            RootNotFoundError: if the root does not exist
            RootNotADirectoryError: if the root is not a directory
            EntryReadError: if the root cannot be listed, or any entry
                is unreadable while ``ignore_errors`` is False
        """
        start_time = time.time()
        
        root_path = self.validate_root(root_path)
        errors: list[tuple[str, str]] = []
        
        files = dict(sorted(self._walk(root_path, errors)))
        
        scan_time = time.time() - start_time
        logging.debug(f"FolderScanner - Scanned {root_path}: {len(files)} files, "
                      f"{len(errors)} errors in {scan_time:.3f}s")
        
        return ScanResult(
            root_path=root_path,
            files=files,
            errors=errors,
            scan_time=scan_time
        )
    
    def scan_lazy(
        self,
        root_path: Path | str,
        errors: Optional[list[tuple[str, str]]] = None
    ) -> Iterator[tuple[str, Path]]:
        """
        Lazily scan a directory, yielding (relative path, absolute path)
        pairs as they are found.
        
        Skipped entries are appended to ``errors`` when given.
        """
        root_path = self.validate_root(root_path)
        yield from self._walk(root_path, errors if errors is not None else [])
    
    def validate_root(self, root_path: Path | str) -> Path:
        """Make the root absolute and check it is a directory."""
        root_path = Path(root_path).absolute()
        
        if not root_path.exists():
            logging.error(f"FolderScanner - Root path not found: {root_path}")
            raise RootNotFoundError(root_path)
        
        if not root_path.is_dir():
            logging.error(f"FolderScanner - Root path is not a directory: {root_path}")
            raise RootNotADirectoryError(root_path)
        
        return root_path
    
    def _walk(
        self,
        root_path: Path,
        errors: list[tuple[str, str]]
    ) -> Iterator[tuple[str, Path]]:
        """Walk the tree below an already validated root."""
        follow_symlinks = self.options.follow_symlinks
        
        def on_walk_error(error: OSError):
            failed = Path(error.filename) if error.filename else root_path
            if failed == root_path:
                logging.error(f"FolderScanner - Cannot list root {root_path}: {error}")
                raise EntryReadError(root_path, error.strerror or str(error)) from error
            self._skip_entry(root_path, failed, f"Access error: {error.strerror}", errors)
        
        for dirpath, dirnames, filenames in os.walk(
            root_path,
            topdown=True,
            followlinks=follow_symlinks,
            onerror=on_walk_error
        ):
            current_path = Path(dirpath)
            
            # Prune excluded directories in-place to stop recursion
            dirnames[:] = sorted(
                d for d in dirnames
                if not self.matcher.matches((current_path / d).as_posix())
            )
            
            for filename in sorted(filenames):
                file_path = current_path / filename
                
                if self.matcher.matches(file_path.as_posix()):
                    continue
                
                try:
                    if follow_symlinks:
                        mode = file_path.stat().st_mode
                    else:
                        mode = file_path.lstat().st_mode
                except OSError as e:
                    self._skip_entry(root_path, file_path, str(e), errors)
                    continue
                
                if not stat.S_ISREG(mode):
                    logging.debug(f"FolderScanner - Skipping non-regular file {file_path}")
                    continue
                
                yield file_path.relative_to(root_path).as_posix(), file_path
    
    def _skip_entry(
        self,
        root_path: Path,
        path: Path,
        message: str,
        errors: list[tuple[str, str]]
    ) -> None:
        """Record an unreadable entry, or raise in strict mode."""
        try:
            rel_path = path.relative_to(root_path).as_posix()
        except ValueError:
            rel_path = str(path)
        
        if not self.options.ignore_errors:
            logging.error(f"FolderScanner - Unreadable entry {rel_path}: {message}")
            raise EntryReadError(path, message)
        
        errors.append((rel_path, message))
        logging.warning(f"FolderScanner - Skipping unreadable entry {rel_path}: {message}")
