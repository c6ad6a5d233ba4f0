"""
Cadence macOS menu bar application using rumps.

Provides a native macOS menu bar icon showing the current phase and next
reminder, with items to reload or open the settings file. Reminders are
delivered as Notification Center banners.
"""

import logging
from typing import Optional

import rumps

import config
from core.scheduler import ReminderScheduler
from menubar import format_status, open_in_default_app
from preferences.manager import get_settings_manager

logger = logging.getLogger(__name__)

# Resolve icon path
_ASSETS_DIR = config.BASE_DIR / "assets"
_ICON_PATH = _ASSETS_DIR / "menu_icon.png"


def _get_icon_path() -> Optional[str]:
    """Get the menu bar icon path, or None to use text title."""
    if _ICON_PATH.exists():
        return str(_ICON_PATH)
    return None


class CadenceMenuBar(rumps.App):
    """macOS menu bar application for Cadence."""

    def __init__(self) -> None:
        """Initialise the menu bar app, settings and scheduler."""
        icon_path = _get_icon_path()
        super().__init__(
            name="Cadence",
            title=None if icon_path else "⏱",
            icon=icon_path,
            template=True,
            quit_button=None,
        )

        self.settings = get_settings_manager()
        self.scheduler = ReminderScheduler(self.settings.snapshot, notifier=self)

        # Status display (non-clickable)
        self.status_item = rumps.MenuItem("Starting...")
        self.next_item = rumps.MenuItem("")
        self.settings_item = rumps.MenuItem(self.settings.snapshot().describe())
        for item in (self.status_item, self.next_item, self.settings_item):
            item.set_callback(None)

        self.reload_item = rumps.MenuItem("Reload Settings", callback=self._reload_settings)
        self.open_item = rumps.MenuItem("Open Settings File", callback=self._open_settings_file)
        self.quit_item = rumps.MenuItem("Quit Cadence", callback=self._quit_app)

        self.menu = [
            self.status_item,
            self.next_item,
            self.settings_item,
            None,
            self.reload_item,
            self.open_item,
            None,
            self.quit_item,
        ]

    # ------------------------------------------------------------------
    # Notifier interface (called from the scheduler thread)
    # ------------------------------------------------------------------

    def notify(self, title: str, body: str) -> None:
        """Show a reminder in Notification Center."""
        rumps.notification(title=title, subtitle="", message=body)

    # ------------------------------------------------------------------
    # Timer (refreshes menu text)
    # ------------------------------------------------------------------

    @rumps.timer(15)
    def _tick(self, timer) -> None:
        """Refresh the status lines from the scheduler."""
        state_text, next_text = format_status(self.scheduler.get_status())
        self.status_item.title = state_text
        self.next_item.title = next_text
        self.settings_item.title = self.settings.snapshot().describe()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _reload_settings(self, sender) -> None:
        """Re-read the settings file through the validated update path."""
        if not self.settings.store.exists():
            rumps.alert(title="Cadence", message="No settings file yet. Using current settings.")
            return
        result = self.settings.import_settings(config.SETTINGS_FILE)
        if result["success"]:
            rumps.notification(
                title="Cadence",
                subtitle="Settings reloaded",
                message=self.settings.snapshot().describe(),
            )
            self._tick(None)
        else:
            rumps.alert(title="Invalid Settings", message=result["error"])

    def _open_settings_file(self, sender) -> None:
        """Open settings.json in the default editor, creating it if needed."""
        if not self.settings.store.exists():
            result = self.settings.export_settings(config.SETTINGS_FILE)
            if not result["success"]:
                rumps.alert(title="Cadence", message=result["error"])
                return
        open_in_default_app(config.SETTINGS_FILE)
        logger.info(f"Opened settings file: {config.SETTINGS_FILE}")

    # ------------------------------------------------------------------
    # Quit
    # ------------------------------------------------------------------

    def _quit_app(self, sender) -> None:
        """Stop the scheduler and quit."""
        self.scheduler.stop()
        rumps.quit_application()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, **options) -> None:
        """Start the scheduler, then the rumps event loop."""
        self.scheduler.start()
        super().run(**options)
