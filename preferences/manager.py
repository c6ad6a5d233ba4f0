"""
Shared reminder settings with validated update and load paths.

The scheduler thread reads a snapshot every tick while the UI thread may
replace it at any time. Snapshots are immutable; the read lock only guards the
reference swap, so readers never see a half-applied update.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import config
from preferences.model import ReminderSettings, SettingsValidationError
from preferences.store import SettingsStore, SettingsStoreError, read_json, write_json_atomic

logger = logging.getLogger(__name__)


def _result(success: bool, error: Optional[str] = None, error_type: Optional[str] = None) -> Dict:
    return {"success": success, "error": error, "error_type": error_type}


class SettingsManager:
    """
    Owns the current ReminderSettings snapshot.

    Handles:
    - Snapshot reads for the scheduler (thread-safe)
    - The settings-update operation (validate, persist, replace)
    - The settings-load operation at startup (graceful fallback)
    - Import/export of the settings file
    """

    def __init__(self, store: SettingsStore, initial: Optional[ReminderSettings] = None) -> None:
        """
        Initialise with the built-in default snapshot.

        Args:
            store: Persistence backend.
            initial: Starting snapshot (defaults to ReminderSettings()).
        """
        self.store = store
        self._lock = threading.Lock()
        # Serialises writers so persist-then-replace and read-modify-write stay whole
        self._write_lock = threading.RLock()
        self._settings: ReminderSettings = initial if initial is not None else ReminderSettings()

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    def snapshot(self) -> ReminderSettings:
        """Get the current settings. The returned object never changes."""
        with self._lock:
            return self._settings

    def _replace(self, settings: ReminderSettings) -> None:
        with self._lock:
            self._settings = settings

    # ------------------------------------------------------------------
    # Update / load
    # ------------------------------------------------------------------

    def save_settings(self, payload: Dict[str, Any]) -> Dict:
        """
        Validate a full settings payload, persist it, and make it current.

        Start later than end is accepted as an overnight window.

        Args:
            payload: Mapping with work_duration, break_duration, start_time,
                end_time and active_days.

        Returns:
            {"success": bool, "error": str | None, "error_type": str | None}
            error_type values: "validation", "persistence"
        """
        try:
            settings = ReminderSettings.from_dict(payload)
        except SettingsValidationError as e:
            logger.info(f"Rejected settings update: {e}")
            return _result(False, str(e), "validation")

        # Persist first; the live snapshot only changes once it is on disk
        with self._write_lock:
            try:
                self.store.save(settings.to_dict())
            except SettingsStoreError as e:
                logger.error(f"Failed to save settings: {e}")
                return _result(False, str(e), "persistence")

            self._replace(settings)
        logger.info(f"Settings updated: {settings.describe()}")
        return _result(True)

    def update_fields(self, **changes: Any) -> Dict:
        """
        Change some fields, keeping the rest from the current snapshot.

        Goes through save_settings, so the same validation applies.
        """
        with self._write_lock:
            payload = self.snapshot().to_dict()
            payload.update(changes)
            return self.save_settings(payload)

    def load_settings(self) -> bool:
        """
        Replace the current snapshot with the persisted one, if valid.

        Missing or malformed data leaves the current snapshot in place.

        Returns:
            True if a stored snapshot was applied.
        """
        try:
            data = self.store.load()
        except SettingsStoreError as e:
            logger.warning(f"{e}. Keeping current settings.")
            return False

        if data is None:
            logger.info("No saved settings, using defaults")
            return False

        try:
            settings = ReminderSettings.from_dict(data)
        except SettingsValidationError as e:
            logger.warning(f"Invalid saved settings ({e}). Keeping current settings.")
            return False

        with self._write_lock:
            self._replace(settings)
        logger.info(f"Loaded settings: {settings.describe()}")
        return True

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_settings(self, path: Path) -> Dict:
        """
        Write the current snapshot to an arbitrary JSON file.

        Returns:
            {"success": bool, "error": str | None, "error_type": str | None}
        """
        try:
            write_json_atomic(Path(path), self.snapshot().to_dict())
        except SettingsStoreError as e:
            logger.error(f"Export failed: {e}")
            return _result(False, str(e), "persistence")
        logger.info(f"Exported settings to {path}")
        return _result(True)

    def import_settings(self, path: Path) -> Dict:
        """
        Read a JSON settings file and apply it through save_settings.

        Returns:
            {"success": bool, "error": str | None, "error_type": str | None}
        """
        try:
            payload = read_json(Path(path))
        except SettingsStoreError as e:
            logger.warning(f"Import failed: {e}")
            return _result(False, str(e), "persistence")
        return self.save_settings(payload)


# Global instance for easy access (thread-safe singleton)
_settings_manager_instance: Optional[SettingsManager] = None
_settings_manager_lock = threading.Lock()


def get_settings_manager() -> SettingsManager:
    """
    Get the global SettingsManager, loading saved settings on first use.

    Returns:
        Singleton SettingsManager instance.
    """
    global _settings_manager_instance
    if _settings_manager_instance is None:
        with _settings_manager_lock:
            # Double-check after acquiring lock
            if _settings_manager_instance is None:
                manager = SettingsManager(SettingsStore(config.SETTINGS_FILE))
                manager.load_settings()
                _settings_manager_instance = manager
    return _settings_manager_instance
