"""
Menu bar / system tray package for Cadence.

Provides a cross-platform launcher that picks the right UI:
- macOS: rumps-based native menu bar
- Windows / Linux: pystray-based system tray
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, Tuple

import config
from core.scheduler import (
    STATE_BREAK,
    STATE_INACTIVE_DAY,
    STATE_NO_CYCLE,
    STATE_OUTSIDE_WINDOW,
    STATE_WORK,
)

logger = logging.getLogger(__name__)

_STATE_TEXT = {
    STATE_WORK: "Working",
    STATE_BREAK: "On a break",
    STATE_OUTSIDE_WINDOW: "Outside active hours",
    STATE_INACTIVE_DAY: "Day off",
    STATE_NO_CYCLE: "Cycle length is zero",
}

_CATEGORY_TEXT = {
    config.REMINDER_WORK_START: "work",
    config.REMINDER_BREAK_START: "break",
}


def format_status(status: Dict) -> Tuple[str, str]:
    """
    Turn ReminderScheduler.get_status() into menu text.

    Returns:
        (state line, next reminder line)
    """
    state_text = _STATE_TEXT.get(status.get("state"), "Idle")
    if not status.get("is_running"):
        state_text = f"{state_text} (paused)"

    upcoming = status.get("next_reminder")
    if upcoming:
        when, category = upcoming
        next_text = f"Next: {_CATEGORY_TEXT.get(category, category)} at {when:%a %H:%M}"
    else:
        next_text = "No upcoming reminders"
    return state_text, next_text


def open_in_default_app(path: Path) -> None:
    """Open a file with the platform's default application."""
    if sys.platform == "win32":
        os.startfile(str(path))
    elif sys.platform == "darwin":
        subprocess.run(["open", str(path)], check=False)
    else:
        subprocess.run(["xdg-open", str(path)], check=False)


def run_menubar_app() -> None:
    """Launch the appropriate menu bar app for the current platform."""
    if sys.platform == "darwin":
        from menubar.macos_app import CadenceMenuBar
        app = CadenceMenuBar()
        app.run()
    else:
        from menubar.tray_app import CadenceTray
        app = CadenceTray()
        app.run()
