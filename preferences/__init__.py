"""Reminder settings: value type, JSON store and the shared snapshot."""

from preferences.model import ReminderSettings, SettingsValidationError
from preferences.store import SettingsStore, SettingsStoreError
from preferences.manager import SettingsManager, get_settings_manager

__all__ = [
    "ReminderSettings",
    "SettingsValidationError",
    "SettingsStore",
    "SettingsStoreError",
    "SettingsManager",
    "get_settings_manager",
]
