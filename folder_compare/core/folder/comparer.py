"""
Folder comparison engine.

Compares a base and a target directory tree and classifies every
file under the target as:
- New (no file at the same relative path under the base)
- Changed (a counterpart exists but its fingerprint differs)
- Unchanged (a counterpart exists with an equal fingerprint)

Files present only under the base are not reported.
"""

from __future__ import annotations

import logging
import stat
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from folder_compare.core.folder.scanner import FolderScanner, PatternMatcher, ScanOptions
from folder_compare.core.models import FolderCompareResult, ScanResult
from folder_compare.services.hashing import DEFAULT_CHUNK_SIZE, HashAlgorithm, HashingService


@dataclass
class CompareOptions:
    """Options for folder comparison."""
    # Fingerprinting
    hash_algorithm: HashAlgorithm = HashAlgorithm.XXH64
    chunk_size: int = DEFAULT_CHUNK_SIZE
    
    # Scanning options
    follow_symlinks: bool = False
    
    # Filtering: regular expressions searched in the full path
    exclude_patterns: list[str] = field(default_factory=list)
    
    # Performance
    parallel_workers: int = 4
    
    # Error handling: skip entries that become unreadable while scanning
    ignore_errors: bool = True


class FolderComparer:
    """
    Compares a base folder tree with a target folder tree.
    
    A comparer holds no state between calls; the pattern matcher and
    both scans are built fresh by every ``compare``.
    """
    
    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()
        self._hashing = HashingService(
            default_algorithm=self.options.hash_algorithm,
            chunk_size=self.options.chunk_size
        )
    
    def compare(
        self,
        base_path: Path | str,
        target_path: Path | str
    ) -> FolderCompareResult:
        """
        Compare two directories.
        
        Args:
            base_path: Base/reference directory
            target_path: Target directory whose files are classified
        
        Returns:
            FolderCompareResult with sorted changed, new and unchanged lists
        
        Raises:
            PatternCompileError: before any filesystem access
            RootNotFoundError, RootNotADirectoryError: for an invalid root
            EntryReadError: for a traversal failure in strict mode
            FileReadError: if a file cannot be read for hashing
        """
        start_time = time.time()
        
        matcher = PatternMatcher(self.options.exclude_patterns)
        
        scanner = FolderScanner(
            ScanOptions(
                follow_symlinks=self.options.follow_symlinks,
                exclude_patterns=list(self.options.exclude_patterns),
                ignore_errors=self.options.ignore_errors,
            ),
            matcher=matcher
        )
        
        # Validate both roots before walking either of them
        base_root = scanner.validate_root(base_path)
        target_root = scanner.validate_root(target_path)
        
        base_scan = scanner.scan(base_root)
        target_scan = scanner.scan(target_root)
        
        logging.info(f"FolderComparer - Comparing {target_scan.file_count} target files "
                     f"against {base_scan.file_count} base files")
        
        result = self._compare_scans(base_scan, target_scan)
        result.compare_time = time.time() - start_time
        
        logging.info(f"FolderComparer - {result.summary} ({result.compare_time:.3f}s)")
        return result
    
    def _compare_scans(
        self,
        base_scan: ScanResult,
        target_scan: ScanResult
    ) -> FolderCompareResult:
        """Correlate two scan results by relative path."""
        new_files: list[str] = []
        pairs: list[tuple[str, Path, Path]] = []
        
        for rel_path, target_file in target_scan.files.items():
            base_file = base_scan.get_path(rel_path)
            if base_file is None:
                # The base entry may be filtered out by a pattern that
                # only matches the base root's own path
                base_file = self._find_counterpart(base_scan.root_path, rel_path)
            if base_file is None:
                new_files.append(rel_path)
            else:
                pairs.append((rel_path, base_file, target_file))
        
        changed_files: list[str] = []
        unchanged_files: list[str] = []
        
        for rel_path, is_identical in self._compare_files(pairs).items():
            if is_identical:
                unchanged_files.append(rel_path)
            else:
                changed_files.append(rel_path)
        
        return FolderCompareResult(
            base_path=str(base_scan.root_path),
            target_path=str(target_scan.root_path),
            changed_files=sorted(changed_files),
            new_files=sorted(new_files),
            unchanged_files=sorted(unchanged_files),
            scan_errors=base_scan.errors + target_scan.errors,
        )
    
    def _find_counterpart(self, base_root: Path, rel_path: str) -> Optional[Path]:
        """Look up a regular file at ``rel_path`` under the base root."""
        base_file = base_root / rel_path
        try:
            if self.options.follow_symlinks:
                mode = base_file.stat().st_mode
            else:
                mode = base_file.lstat().st_mode
        except OSError:
            return None
        
        if not stat.S_ISREG(mode):
            return None
        
        logging.debug(f"FolderComparer - Found excluded base counterpart for {rel_path}")
        return base_file
    
    def _compare_files(
        self,
        pairs: list[tuple[str, Path, Path]]
    ) -> dict[str, bool]:
        """Fingerprint each pair, returning relative path -> identical."""
        if self.options.parallel_workers <= 1 or len(pairs) <= 1:
            return {
                rel_path: self._compare_single_file(base_file, target_file)
                for rel_path, base_file, target_file in pairs
            }
        
        results: dict[str, bool] = {}
        
        with ThreadPoolExecutor(max_workers=self.options.parallel_workers) as executor:
            futures = {
                executor.submit(self._compare_single_file, base_file, target_file): rel_path
                for rel_path, base_file, target_file in pairs
            }
            
            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            for future in not_done:
                future.cancel()
            
            for future in done:
                # Re-raises the first FileReadError from a worker
                results[futures[future]] = future.result()
        
        return results
    
    def _compare_single_file(self, base_file: Path, target_file: Path) -> bool:
        """Compare a single file pair by fingerprint."""
        return self._hashing.compare_files_by_hash(base_file, target_file)


def compare(
    base_path: Path | str,
    target_path: Path | str,
    excluded: Sequence[str] = ()
) -> tuple[list[str], list[str]]:
    """
    Compare two folders and return ``(changed_files, new_files)``.
    
    Both lists hold forward-slash relative paths, sorted.
    """
    options = CompareOptions(exclude_patterns=list(excluded))
    return FolderComparer(options).compare(base_path, target_path).as_tuple()
