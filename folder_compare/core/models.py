"""
Core data models for the folder comparison engine.

Contains the dataclasses and enums shared by the scanner,
the comparer and the command line front end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Iterator


# =============================================================================
# Enums
# =============================================================================

class FileStatus(Enum):
    """Status of a target file in folder comparison."""
    UNCHANGED = auto()  # Present in both roots with equal fingerprints
    CHANGED = auto()    # Present in both roots, fingerprints differ
    NEW = auto()        # Present only under the target root


# =============================================================================
# Scanning Models
# =============================================================================

@dataclass
class ScanResult:
    """Result of a directory scan."""
    root_path: Path
    files: dict[str, Path]  # Relative POSIX path -> absolute path
    errors: list[tuple[str, str]] = field(default_factory=list)  # (path, error message)
    scan_time: float = 0.0
    
    @property
    def file_count(self) -> int:
        return len(self.files)
    
    @property
    def error_count(self) -> int:
        return len(self.errors)
    
    def get_path(self, relative_path: str) -> Path | None:
        """Get the absolute path for a relative path."""
        return self.files.get(relative_path)
    
    def __contains__(self, relative_path: str) -> bool:
        return relative_path in self.files


# =============================================================================
# Folder Comparison Models
# =============================================================================

@dataclass
class FolderCompareResult:
    """Complete result of a folder comparison."""
    base_path: str
    target_path: str
    changed_files: list[str] = field(default_factory=list)
    new_files: list[str] = field(default_factory=list)
    unchanged_files: list[str] = field(default_factory=list)
    scan_errors: list[tuple[str, str]] = field(default_factory=list)
    compare_time: float = 0.0        # Time taken in seconds
    
    @property
    def total_files(self) -> int:
        """Number of target files that were classified."""
        return len(self.changed_files) + len(self.new_files) + len(self.unchanged_files)
    
    @property
    def total_differences(self) -> int:
        """Total number of differences found."""
        return len(self.changed_files) + len(self.new_files)
    
    @property
    def is_identical(self) -> bool:
        """True if the target holds nothing new or changed."""
        return self.total_differences == 0
    
    @property
    def summary(self) -> str:
        """Get a summary string."""
        return (f"Files: {self.total_files}, Changed: {len(self.changed_files)}, "
                f"New: {len(self.new_files)}, Unchanged: {len(self.unchanged_files)}")
    
    def as_tuple(self) -> tuple[list[str], list[str]]:
        """Return the (changed_files, new_files) pair."""
        return self.changed_files, self.new_files
    
    def iter_by_status(self, status: FileStatus) -> Iterator[str]:
        """Iterate over relative paths with the given status."""
        if status == FileStatus.CHANGED:
            yield from self.changed_files
        elif status == FileStatus.NEW:
            yield from self.new_files
        else:
            yield from self.unchanged_files
    
    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            'base_path': self.base_path,
            'target_path': self.target_path,
            'changed_files': list(self.changed_files),
            'new_files': list(self.new_files),
            'unchanged_files': list(self.unchanged_files),
            'scan_errors': [list(error) for error in self.scan_errors],
            'compare_time': self.compare_time,
        }
