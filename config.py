"""Configuration settings for Cadence."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv


def is_bundled() -> bool:
    """
    Check if the application is running from a PyInstaller bundle.

    Returns:
        True if running from a bundled executable, False otherwise.
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


def get_base_dir() -> Path:
    """
    Get the base directory for the application.

    For development: Returns the directory containing this file.
    For bundled apps: Returns _MEIPASS (where bundled resources live).

    Returns:
        Path to the base directory.
    """
    if is_bundled():
        meipass = getattr(sys, '_MEIPASS', None)
        if meipass:
            return Path(meipass)
        return Path(__file__).parent
    else:
        return Path(__file__).parent


def get_user_data_dir() -> Path:
    """
    Get the directory for user-writable data (reminder settings).

    For development: Same as BASE_DIR/data
    For bundled apps: Uses a dedicated folder in the user's home directory
                      to persist data across updates.

    Returns:
        Path to the user data directory.
    """
    if is_bundled():
        if sys.platform == 'darwin':
            # macOS: ~/Library/Application Support/Cadence
            data_dir = Path.home() / "Library" / "Application Support" / "Cadence"
        elif sys.platform == 'win32':
            # Windows: %APPDATA%/Cadence
            appdata = os.environ.get('APPDATA')
            if appdata:
                data_dir = Path(appdata) / "Cadence"
            else:
                data_dir = Path.home() / "AppData" / "Roaming" / "Cadence"
        else:
            # Linux: ~/.local/share/Cadence
            data_dir = Path.home() / ".local" / "share" / "Cadence"

        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            data_dir = Path.home() / ".cadence"
            data_dir.mkdir(parents=True, exist_ok=True)

        return data_dir
    else:
        # Development mode
        return Path(__file__).parent / "data"


def _get_int_env(name: str, default: int, minimum: int = 0) -> int:
    """
    Read an integer from the environment, falling back on bad values.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or invalid.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer, or default.
    """
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"{name}={raw!r} is not an integer, using {default}"
        )
        return default
    if value < minimum:
        logging.getLogger(__name__).warning(
            f"{name}={value} is below {minimum}, using {default}"
        )
        return default
    return value


def _get_time_env(name: str, default: str) -> str:
    """
    Read an "HH:MM" time of day from the environment, falling back on bad values.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or invalid.

    Returns:
        Zero-padded "HH:MM" string, or default.
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return datetime.strptime(raw, "%H:%M").strftime("%H:%M")
    except ValueError:
        logging.getLogger(__name__).warning(
            f"{name}={raw!r} is not an HH:MM time, using {default}"
        )
        return default


# Load environment variables from .env file (only in development)
if not is_bundled():
    _env_path = Path(__file__).parent / ".env"
    load_dotenv(_env_path)

# Base directory (for bundled resources like assets)
BASE_DIR = get_base_dir()

# User data directory (for writable data like settings)
USER_DATA_DIR = get_user_data_dir()

# Settings persistence
SETTINGS_FILE = Path(os.getenv("CADENCE_SETTINGS_FILE", "") or USER_DATA_DIR / "settings.json")

# Scheduler cadence (seconds between ticks). Boundary detection is an exact
# minute match, so anything above 60 can skip boundaries.
POLL_INTERVAL_SECONDS = _get_int_env("CADENCE_POLL_INTERVAL", 60, minimum=1)

# Built-in fallback reminder configuration
DEFAULT_WORK_MINUTES = _get_int_env("CADENCE_DEFAULT_WORK_MINUTES", 45)
DEFAULT_BREAK_MINUTES = _get_int_env("CADENCE_DEFAULT_BREAK_MINUTES", 5)
DEFAULT_START_TIME = _get_time_env("CADENCE_DEFAULT_START_TIME", "09:00")
DEFAULT_END_TIME = _get_time_env("CADENCE_DEFAULT_END_TIME", "18:00")
DEFAULT_ACTIVE_DAYS = (1, 2, 3, 4, 5)  # Monday..Friday

# Time-of-day format for start/end times
TIME_FORMAT = "%H:%M"

# Weekday numbering (ISO: 1=Monday .. 7=Sunday)
WEEKDAY_NAMES = {
    1: "Mon",
    2: "Tue",
    3: "Wed",
    4: "Thu",
    5: "Fri",
    6: "Sat",
    7: "Sun",
}

# Reminder categories
REMINDER_WORK_START = "work-start"
REMINDER_BREAK_START = "break-start"

# (title, body) per category. Body is formatted with the active settings.
REMINDER_MESSAGES = {
    REMINDER_WORK_START: (
        "Time to focus",
        "A {work_duration}-minute work block starts now.",
    ),
    REMINDER_BREAK_START: (
        "Time for a break",
        "Step away from the screen for {break_duration} minutes.",
    ),
}

# How far ahead the status view searches for the next reminder (minutes)
NEXT_REMINDER_HORIZON_MINUTES = 7 * 24 * 60

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # Can override in .env: DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
