"""
Hashing service for content fingerprints.

Fingerprints are fast non-cryptographic xxHash digests. They are used
only to test two files for equality; a collision is accepted as a
negligible risk rather than falling back to byte-by-byte comparison.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import xxhash

from folder_compare.core.errors import FileReadError


DEFAULT_CHUNK_SIZE = 65536


class HashAlgorithm(Enum):
    """Supported fingerprint algorithms."""
    XXH64 = "xxh64"        # 64-bit, default
    XXH3_64 = "xxh3_64"
    XXH3_128 = "xxh3_128"
    
    @classmethod
    def from_string(cls, value: str) -> 'HashAlgorithm':
        """Create from a value or member name, case-insensitive."""
        for algorithm in cls:
            if algorithm.value == value.lower():
                return algorithm
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown hash algorithm: {value}") from None


_HASHERS: dict[HashAlgorithm, Callable[[], object]] = {
    HashAlgorithm.XXH64: xxhash.xxh64,
    HashAlgorithm.XXH3_64: xxhash.xxh3_64,
    HashAlgorithm.XXH3_128: xxhash.xxh3_128,
}


@dataclass(frozen=True)
class HashResult:
    """Result of a hash operation."""
    algorithm: HashAlgorithm
    hash_bytes: bytes
    file_size: int
    
    @property
    def hash_hex(self) -> str:
        return self.hash_bytes.hex()
    
    def matches(self, other: 'HashResult') -> bool:
        """Check if this fingerprint equals another."""
        return (self.algorithm == other.algorithm and
                self.hash_bytes == other.hash_bytes)


class HashingService:
    """Service for computing file fingerprints."""
    
    def __init__(
        self,
        default_algorithm: HashAlgorithm = HashAlgorithm.XXH64,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.default_algorithm = default_algorithm
        self.chunk_size = chunk_size
    
    def hash_file(
        self,
        path: Path | str,
        algorithm: Optional[HashAlgorithm] = None
    ) -> HashResult:
        """
        Compute the fingerprint of a file.
        
        The whole file is streamed through the hasher in chunks.
        
        Raises:
            FileReadError: if the file cannot be opened or fully read
        """
        path = Path(path)
        algorithm = algorithm or self.default_algorithm
        hasher = self._create_hasher(algorithm)
        file_size = 0
        
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    hasher.update(chunk)
                    file_size += len(chunk)
        except OSError as e:
            logging.error(f"HashingService - Error reading {path}: {e}")
            raise FileReadError(path, e.strerror or str(e)) from e
        
        return HashResult(
            algorithm=algorithm,
            hash_bytes=hasher.digest(),
            file_size=file_size
        )
    
    def hash_bytes(
        self,
        data: bytes,
        algorithm: Optional[HashAlgorithm] = None
    ) -> HashResult:
        """Compute the fingerprint of in-memory bytes."""
        algorithm = algorithm or self.default_algorithm
        hasher = self._create_hasher(algorithm)
        hasher.update(data)
        
        return HashResult(
            algorithm=algorithm,
            hash_bytes=hasher.digest(),
            file_size=len(data)
        )
    
    def compare_files_by_hash(
        self,
        path1: Path | str,
        path2: Path | str,
        algorithm: Optional[HashAlgorithm] = None
    ) -> bool:
        """Compare two files by their fingerprints."""
        hash1 = self.hash_file(path1, algorithm)
        hash2 = self.hash_file(path2, algorithm)
        return hash1.matches(hash2)
    
    def _create_hasher(self, algorithm: HashAlgorithm):
        """Create a hasher for the given algorithm."""
        try:
            return _HASHERS[algorithm]()
        except KeyError:
            raise ValueError(f"Unknown algorithm: {algorithm}") from None
