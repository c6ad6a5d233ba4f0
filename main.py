#!/usr/bin/env python3
"""
Cadence - Main Entry Point

A work/break reminder that lives in the menu bar (macOS) or system tray
(Windows/Linux) and nudges you when a work block or a break begins.

Usage:
    python main.py                            # Launch menu bar app (default)
    python main.py --cli                      # Run reminders in this terminal
    python main.py --show-settings            # Print current settings
    python main.py --work 50 --break 10       # Change settings
    python main.py --start 22:00 --end 06:00  # Overnight window
    python main.py --export-settings cadence.json
    python main.py --import-settings cadence.json
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from typing import Dict, List, Optional

import config
from core.notifier import ConsoleNotifier
from core.scheduler import ReminderScheduler, find_next_reminder
from preferences.manager import SettingsManager, get_settings_manager

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Suppress noisy third-party library logs
logging.getLogger("PIL").setLevel(logging.WARNING)

_DAY_ALIASES = {name.lower(): number for number, name in config.WEEKDAY_NAMES.items()}


def parse_days(text: str) -> List[int]:
    """
    Parse a weekday list such as "1,2,3", "mon,tue,fri" or "mon-fri".

    Raises:
        argparse.ArgumentTypeError: If a token is not a weekday.
    """
    def _one(token: str) -> int:
        token = token.strip().lower()
        if token in _DAY_ALIASES:
            return _DAY_ALIASES[token]
        if token.isdigit() and 1 <= int(token) <= 7:
            return int(token)
        raise argparse.ArgumentTypeError(f"invalid weekday {token!r} (use 1-7 or mon..sun)")

    days: List[int] = []
    for part in text.split(","):
        if not part.strip():
            continue
        if "-" in part:
            first, last = (_one(p) for p in part.split("-", 1))
            if first > last:
                raise argparse.ArgumentTypeError(f"invalid weekday range {part.strip()!r}")
            days.extend(range(first, last + 1))
        else:
            days.append(_one(part))
    return days


def collect_updates(args: argparse.Namespace) -> Dict:
    """Get the settings fields given on the command line."""
    updates = {}
    if args.work is not None:
        updates["work_duration"] = args.work
    if args.break_minutes is not None:
        updates["break_duration"] = args.break_minutes
    if args.start is not None:
        updates["start_time"] = args.start
    if args.end is not None:
        updates["end_time"] = args.end
    if args.days is not None:
        updates["active_days"] = args.days
    return updates


def _report(result: Dict, success_message: str) -> int:
    """Print an operation result and return the exit code."""
    if result["success"]:
        print(f"✓ {success_message}")
        return 0
    print(f"❌ {result['error']}")
    return 1


def show_settings(manager: SettingsManager, now: Optional[datetime] = None) -> None:
    """Print the current settings and the next reminder."""
    settings = manager.snapshot()
    print(json.dumps(settings.to_dict(), indent=2))
    print(f"\n{settings.describe()}")
    upcoming = find_next_reminder(now or datetime.now(), settings)
    if upcoming:
        when, category = upcoming
        print(f"Next reminder: {category} at {when:%a %Y-%m-%d %H:%M}")
    else:
        print("No reminders within the next week.")
    print(f"Settings file: {manager.store.settings_path}")


def run_settings_commands(manager: SettingsManager, args: argparse.Namespace) -> Optional[int]:
    """
    Handle the settings flags.

    Returns:
        Exit code if a settings command ran, None if none was requested.
    """
    if args.import_settings:
        return _report(
            manager.import_settings(args.import_settings),
            f"Imported settings from {args.import_settings}",
        )

    updates = collect_updates(args)
    if updates:
        code = _report(manager.update_fields(**updates), "Settings saved")
        if code == 0:
            print(f"  {manager.snapshot().describe()}")
        return code

    if args.export_settings:
        return _report(
            manager.export_settings(args.export_settings),
            f"Exported settings to {args.export_settings}",
        )

    if args.show_settings:
        show_settings(manager)
        return 0

    return None


def main_cli(manager: SettingsManager) -> None:
    """Run the scheduler in the foreground, printing reminders."""
    scheduler = ReminderScheduler(manager.snapshot, notifier=ConsoleNotifier())

    print("\n" + "=" * 60)
    print("⏱  Cadence - work/break reminders")
    print("=" * 60)
    print(f"\n{manager.snapshot().describe()}")
    status = scheduler.get_status()
    if status["next_reminder"]:
        when, category = status["next_reminder"]
        print(f"Next reminder: {category} at {when:%a %H:%M}")
    print("\nPress Ctrl+C to stop.\n")

    scheduler.start()
    try:
        while scheduler.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    finally:
        scheduler.stop()


def main_menubar() -> None:
    """Run the menu bar / system tray application."""
    from menubar import run_menubar_app
    run_menubar_app()


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="Cadence - work/break reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                            Launch menu bar app (default)
  python main.py --cli                      Run in this terminal
  python main.py --work 50 --break 10 --days mon-fri
  python main.py --start 22:00 --end 06:00  Overnight window (start later than end)
        """
    )
    parser.add_argument("--cli", action="store_true", help="Run in CLI mode (terminal-based)")
    parser.add_argument("--show-settings", action="store_true", help="Print current settings and exit")
    parser.add_argument("--export-settings", metavar="PATH", help="Write current settings to a JSON file")
    parser.add_argument("--import-settings", metavar="PATH", help="Load settings from a JSON file")

    group = parser.add_argument_group("settings")
    group.add_argument("--work", type=int, metavar="MIN", help="Work block length in minutes")
    group.add_argument("--break", dest="break_minutes", type=int, metavar="MIN",
                       help="Break length in minutes")
    group.add_argument("--start", metavar="HH:MM", help="Daily start of reminders")
    group.add_argument("--end", metavar="HH:MM",
                       help="Daily end of reminders (earlier than --start means overnight)")
    group.add_argument("--days", type=parse_days, metavar="DAYS",
                       help="Active weekdays, e.g. 1,2,3,4,5 or mon-fri")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - parses arguments and launches appropriate mode.

    Default mode is menu bar unless --cli or a settings flag is given.
    """
    args = build_parser().parse_args(argv)
    manager = get_settings_manager()

    code = run_settings_commands(manager, args)
    if code is not None:
        return code

    try:
        if args.cli:
            main_cli(manager)
        else:
            main_menubar()
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"\nFatal error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
