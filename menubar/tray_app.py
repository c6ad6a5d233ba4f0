"""
Cadence system tray application using pystray (Windows / Linux).

Shows the current phase and next reminder, lets the user reload or open
the settings file, and delivers reminders as tray notifications.
"""

import logging
import threading
import time

import pystray
from PIL import Image, ImageDraw

import config
from core.scheduler import ReminderScheduler
from menubar import format_status, open_in_default_app
from preferences.manager import get_settings_manager

logger = logging.getLogger(__name__)

# Resolve icon path
_ASSETS_DIR = config.BASE_DIR / "assets"
_ICON_PATH = _ASSETS_DIR / "tray_icon.ico"
_FALLBACK_PNG = _ASSETS_DIR / "tray_icon.png"

# Seconds between tray status refreshes
_STATUS_REFRESH_SECONDS = 15


def _load_icon_image() -> Image.Image:
    """Load the tray icon image."""
    if _ICON_PATH.exists():
        return Image.open(str(_ICON_PATH))
    if _FALLBACK_PNG.exists():
        return Image.open(str(_FALLBACK_PNG))
    # Simple fallback icon: teal clock face
    image = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    draw.ellipse((4, 4, 60, 60), fill=(34, 211, 238, 255))
    draw.line((32, 32, 32, 14), fill=(255, 255, 255, 255), width=5)
    draw.line((32, 32, 46, 32), fill=(255, 255, 255, 255), width=5)
    return image


class CadenceTray:
    """System tray application for Cadence."""

    def __init__(self) -> None:
        """Initialise the tray app, settings and scheduler."""
        self.settings = get_settings_manager()
        self.scheduler = ReminderScheduler(self.settings.snapshot, notifier=self)

        self._state_text: str = "Starting..."
        self._next_text: str = ""

        self.icon = pystray.Icon(
            name="Cadence",
            icon=_load_icon_image(),
            title="Cadence",
            menu=self._build_menu(),
        )

        # Status refresh thread (tooltip and menu text)
        self._status_running: bool = True
        self._status_thread = threading.Thread(target=self._status_loop, daemon=True)

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def _build_menu(self) -> pystray.Menu:
        """Build the tray menu."""
        return pystray.Menu(
            pystray.MenuItem(lambda item: self._state_text, None, enabled=False),
            pystray.MenuItem(lambda item: self._next_text, None, enabled=False),
            pystray.MenuItem(
                lambda item: self.settings.snapshot().describe(),
                None, enabled=False,
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Reload Settings", self._reload_settings),
            pystray.MenuItem("Open Settings File", self._open_settings_file),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit Cadence", self._quit_app),
        )

    # ------------------------------------------------------------------
    # Notifier interface (called from the scheduler thread)
    # ------------------------------------------------------------------

    def notify(self, title: str, body: str) -> None:
        """Show a reminder as a tray notification."""
        self.icon.notify(body, title)
        self._refresh_status()

    # ------------------------------------------------------------------
    # Status loop (background thread)
    # ------------------------------------------------------------------

    def _refresh_status(self) -> None:
        """Recompute menu and tooltip text from the scheduler."""
        try:
            self._state_text, self._next_text = format_status(self.scheduler.get_status())
            self.icon.title = f"Cadence - {self._state_text}"
            self.icon.update_menu()
        except Exception as e:
            logger.debug(f"Tray status refresh failed: {e}")

    def _status_loop(self) -> None:
        """Background thread: keep the tooltip and menu text current."""
        while self._status_running:
            self._refresh_status()
            time.sleep(_STATUS_REFRESH_SECONDS)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _reload_settings(self, icon, item) -> None:
        """Re-read the settings file through the validated update path."""
        if not self.settings.store.exists():
            self.icon.notify("No settings file yet. Using current settings.", "Cadence")
            return
        result = self.settings.import_settings(config.SETTINGS_FILE)
        if result["success"]:
            self.icon.notify(self.settings.snapshot().describe(), "Settings reloaded")
        else:
            self.icon.notify(result["error"], "Cadence Settings Error")
        self._refresh_status()

    def _open_settings_file(self, icon, item) -> None:
        """Open settings.json in the default editor, creating it if needed."""
        if not self.settings.store.exists():
            result = self.settings.export_settings(config.SETTINGS_FILE)
            if not result["success"]:
                self.icon.notify(result["error"], "Cadence Settings Error")
                return
        open_in_default_app(config.SETTINGS_FILE)

    # ------------------------------------------------------------------
    # Quit
    # ------------------------------------------------------------------

    def _quit_app(self, icon, item) -> None:
        """Stop the scheduler and quit."""
        self._status_running = False
        self.scheduler.stop()
        self.icon.stop()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start the scheduler and the tray application."""
        self.scheduler.start()
        self._status_thread.start()
        self.icon.run()
