"""
JSON persistence for reminder settings.

The store treats the payload as opaque structured data; validation
belongs to ReminderSettings and the SettingsManager update path.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SettingsStoreError(OSError):
    """Raised when settings cannot be read from or written to disk."""


def read_json(path: Path) -> Dict[str, Any]:
    """
    Read a settings payload from a JSON file.

    Args:
        path: File to read.

    Returns:
        The decoded JSON object.

    Raises:
        SettingsStoreError: If the file is unreadable, not JSON, or not an object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SettingsStoreError(f"Settings file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise SettingsStoreError(f"Could not read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsStoreError(f"Settings file {path} does not contain a JSON object")
    return data


def write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    """
    Write a JSON payload atomically.

    Uses atomic write (write to temp file, then rename) so a crash during
    save never leaves a truncated settings file behind.

    Args:
        path: Destination file.
        data: JSON-serialisable mapping.

    Raises:
        SettingsStoreError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            suffix='.tmp',
            prefix='settings_',
            dir=path.parent
        )
    except OSError as e:
        raise SettingsStoreError(f"Could not prepare {path} for writing: {e}") from e

    try:
        with os.fdopen(temp_fd, 'w', encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(temp_path, path)
    except (OSError, TypeError, ValueError) as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise SettingsStoreError(f"Could not write settings file {path}: {e}") from e


class SettingsStore:
    """
    Loads and saves the settings snapshot as a JSON file.
    """

    def __init__(self, settings_path: Path):
        """
        Initialise the settings store.

        Args:
            settings_path: Path to the JSON settings file
        """
        self.settings_path = Path(settings_path)

    def exists(self) -> bool:
        """True if a settings file has been saved."""
        return self.settings_path.exists()

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Load the persisted payload.

        Returns:
            The stored mapping, or None if nothing has been saved yet.

        Raises:
            SettingsStoreError: If the file exists but cannot be decoded.
        """
        if not self.settings_path.exists():
            logger.debug(f"No settings file at {self.settings_path}")
            return None
        data = read_json(self.settings_path)
        logger.debug(f"Loaded settings from {self.settings_path}")
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """
        Persist a payload.

        Args:
            data: JSON-serialisable settings mapping.

        Raises:
            SettingsStoreError: If the file cannot be written.
        """
        write_json_atomic(self.settings_path, data)
        logger.info(f"Saved settings to {self.settings_path}")
