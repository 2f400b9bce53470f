"""Settings persistence for per-document view preferences.

Settings are stored as JSON in an OS-appropriate config directory and
indexed by document location: an absolute path for local files, the URL
itself for remote documents.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import platformdirs

from .constants import ViewConstants

logger = logging.getLogger(__name__)


class SettingsKeys:
    """Constants for per-document settings keys."""

    MAXIMUM_WIDTH = "maximum_width"
    WRAP_AROUND = "wrap_around"
    LAST_FOCUSED_TARGET = "last_focused_target"


def normalize_location(location: str) -> Optional[str]:
    """Return the key settings are stored under for a document location."""
    if not location:
        return None
    if urlparse(location).scheme in ("http", "https"):
        return location
    try:
        return os.path.abspath(location)
    except (OSError, ValueError):
        logger.warning("Invalid document path: %s", location)
        return None


class SettingsPersistence:
    """Manages persistent storage of per-document settings."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("markupview"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create config directory %s: %s", self._config_dir, e)

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load all settings from disk.

        Returns:
            Dictionary mapping document locations to their settings.
            Returns empty dict if the file doesn't exist or can't be read.
        """
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._settings_file, e)
            self._settings_cache = {}
            return self._settings_cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Save all settings to disk atomically (temp file + rename)."""
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._settings_file, e)
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
        self._settings_cache = settings
        return True

    def load_settings(self, location: Optional[str]) -> Dict[str, Any]:
        """Load the valid settings stored for a document.

        Invalid values are logged and left out, so callers can apply the
        result without further checks.
        """
        key = normalize_location(location) if location else None
        if key is None:
            return {}
        doc_settings = self._load_all_settings().get(key, {})
        if not isinstance(doc_settings, dict):
            logger.warning("Settings for %s are not a dict, ignoring", key)
            return {}
        valid = {}
        for name, value in doc_settings.items():
            if self.validate_setting(name, value):
                valid[name] = value
            else:
                logger.warning("Ignoring invalid setting %s=%r for %s", name, value, key)
        return valid

    def save_settings(self, location: Optional[str], settings: Dict[str, Any]) -> bool:
        """Merge ``settings`` into the stored settings of a document."""
        key = normalize_location(location) if location else None
        if key is None:
            return False
        all_settings = self._load_all_settings()
        current = all_settings.get(key)
        merged = dict(current) if isinstance(current, dict) else {}
        merged.update(settings)
        updated = dict(all_settings)
        updated[key] = merged
        return self._save_all_settings(updated)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a setting value."""
        if value is None:
            return True  # None means "not set"
        if key == SettingsKeys.MAXIMUM_WIDTH:
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            return ViewConstants.MIN_SETTINGS_WIDTH <= value <= ViewConstants.MAX_SETTINGS_WIDTH
        if key == SettingsKeys.WRAP_AROUND:
            return isinstance(value, bool)
        if key == SettingsKeys.LAST_FOCUSED_TARGET:
            return isinstance(value, str)
        # Unknown settings are considered valid (forward compatibility)
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
