"""
Comparison settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

from folder_compare.core.folder.comparer import CompareOptions
from folder_compare.services.hashing import DEFAULT_CHUNK_SIZE, HashAlgorithm


@dataclass
class ComparisonSettings:
    """Settings for folder comparison."""
    exclude_patterns: list[str] = field(default_factory=list)
    hash_algorithm: HashAlgorithm = HashAlgorithm.XXH64
    chunk_size: int = DEFAULT_CHUNK_SIZE
    parallel_workers: int = 4
    follow_symlinks: bool = False
    ignore_errors: bool = True
    
    def to_compare_options(self) -> CompareOptions:
        """Build comparer options from these settings."""
        return CompareOptions(
            hash_algorithm=self.hash_algorithm,
            chunk_size=self.chunk_size,
            follow_symlinks=self.follow_symlinks,
            exclude_patterns=list(self.exclude_patterns),
            parallel_workers=self.parallel_workers,
            ignore_errors=self.ignore_errors,
        )


class SettingsManager:
    """Manager for loading/saving comparison settings."""
    
    def __init__(self, settings_path: Optional[Path | str] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ComparisonSettings] = None
    
    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'FolderCompare' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'foldercompare' / 'settings.json'
    
    @property
    def settings(self) -> ComparisonSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings
    
    def load(self) -> ComparisonSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ComparisonSettings()
        
        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Could not load settings from "
                            f"{self.settings_path}: {e}")
            return ComparisonSettings()
    
    def save(self, settings: Optional[ComparisonSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False
        
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
            
            self._settings = settings
            return True
        
        except OSError as e:
            logging.error(f"SettingsManager - Could not save settings to "
                          f"{self.settings_path}: {e}")
            return False
    
    def reset(self) -> ComparisonSettings:
        """Reset to default settings."""
        self._settings = ComparisonSettings()
        self.save()
        return self._settings
    
    def _to_dict(self, settings: ComparisonSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        data = asdict(settings)
        data['hash_algorithm'] = settings.hash_algorithm.value
        return {'comparison': data}
    
    def _from_dict(self, data: dict) -> ComparisonSettings:
        """Convert dictionary back to a settings object."""
        defaults = ComparisonSettings()
        comparison: dict[str, Any] = data.get('comparison', {})
        
        exclude_patterns = comparison.get('exclude_patterns', defaults.exclude_patterns)
        if not isinstance(exclude_patterns, list):
            raise ValueError("exclude_patterns must be a list")
        
        chunk_size = int(comparison.get('chunk_size', defaults.chunk_size))
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        
        return ComparisonSettings(
            exclude_patterns=[str(p) for p in exclude_patterns],
            hash_algorithm=HashAlgorithm.from_string(
                comparison.get('hash_algorithm', defaults.hash_algorithm.value)),
            chunk_size=chunk_size,
            parallel_workers=int(comparison.get('parallel_workers', defaults.parallel_workers)),
            follow_symlinks=bool(comparison.get('follow_symlinks', defaults.follow_symlinks)),
            ignore_errors=bool(comparison.get('ignore_errors', defaults.ignore_errors)),
        )
