"""
ReminderScheduler - background loop that fires work/break reminders.

Once per tick the scheduler takes a settings snapshot, checks the active
day and window, computes the cycle phase and, when the phase sits exactly
on a boundary, hands a message to the notifier:

    phase == 0               -> "work-start"
    phase == work_duration   -> "break-start"

Boundary detection is stateless: a tick only asks "is this minute a
boundary?". Ticks are aligned to the wall clock so each minute is seen
once. A late or skipped tick loses that boundary; there is no catch-up.

The notifier is any object with ``notify(title: str, body: str)``.
"""

import logging
import threading
import time
from datetime import datetime, time as dt_time, timedelta
from typing import Callable, Dict, Optional, Tuple

import config
from core.window import anchor_time, cycle_phase, is_within_window, parse_time
from preferences.model import ReminderSettings

logger = logging.getLogger(__name__)

# Ticks land this long after each interval boundary, so an early wake-up
# from the wait never evaluates the previous minute twice.
_TICK_SLACK_SECONDS = 0.5

# Phase labels reported by current_state()
STATE_INACTIVE_DAY = "inactive_day"
STATE_OUTSIDE_WINDOW = "outside_window"
STATE_NO_CYCLE = "no_cycle"
STATE_WORK = "work"
STATE_BREAK = "break"


def _decide(now: datetime, start: dt_time, end: dt_time, settings: ReminderSettings) -> Optional[str]:
    """Decision for an already-parsed window. now must be minute-aligned."""
    if now.isoweekday() not in settings.active_days:
        return None
    if not is_within_window(now.time(), start, end):
        return None

    total_cycle = settings.total_cycle_minutes
    if total_cycle <= 0:
        return None

    phase = cycle_phase(now, anchor_time(now, start, end), total_cycle)
    if phase == 0:
        return config.REMINDER_WORK_START
    if phase == settings.work_duration:
        return config.REMINDER_BREAK_START
    return None


def _parse_window(settings: ReminderSettings) -> Optional[Tuple[dt_time, dt_time]]:
    try:
        return parse_time(settings.start_time), parse_time(settings.end_time)
    except ValueError as e:
        logger.warning(f"Skipping tick, malformed window times: {e}")
        return None


def decide_reminder(now: datetime, settings: ReminderSettings) -> Optional[str]:
    """
    Decide which reminder, if any, is due at the given minute.

    Args:
        now: Local time; seconds are ignored.
        settings: Current settings snapshot.

    Returns:
        config.REMINDER_WORK_START, config.REMINDER_BREAK_START, or None.
    """
    window = _parse_window(settings)
    if window is None:
        return None
    return _decide(now.replace(second=0, microsecond=0), window[0], window[1], settings)


def current_state(now: datetime, settings: ReminderSettings) -> str:
    """
    Describe where now falls in the schedule.

    Returns:
        One of the STATE_* labels. Malformed window times report as
        outside the window.
    """
    window = _parse_window(settings)
    now = now.replace(second=0, microsecond=0)
    if now.isoweekday() not in settings.active_days:
        return STATE_INACTIVE_DAY
    if window is None or not is_within_window(now.time(), *window):
        return STATE_OUTSIDE_WINDOW
    total_cycle = settings.total_cycle_minutes
    if total_cycle <= 0:
        return STATE_NO_CYCLE
    phase = cycle_phase(now, anchor_time(now, *window), total_cycle)
    return STATE_WORK if phase < settings.work_duration else STATE_BREAK


def find_next_reminder(
    now: datetime,
    settings: ReminderSettings,
    horizon_minutes: int = config.NEXT_REMINDER_HORIZON_MINUTES,
) -> Optional[Tuple[datetime, str]]:
    """
    Find the first reminder strictly after now.

    Scans forward minute by minute with the same decision the loop uses.

    Args:
        now: Local time to search from.
        settings: Settings snapshot.
        horizon_minutes: How far ahead to look.

    Returns:
        (when, category), or None if nothing fires within the horizon.
    """
    window = _parse_window(settings)
    if window is None or settings.total_cycle_minutes <= 0:
        return None

    candidate = now.replace(second=0, microsecond=0)
    for _ in range(horizon_minutes):
        candidate += timedelta(minutes=1)
        category = _decide(candidate, window[0], window[1], settings)
        if category:
            return candidate, category
    return None


def build_message(category: str, settings: ReminderSettings) -> Tuple[str, str]:
    """Get the (title, body) for a reminder category."""
    title, body = config.REMINDER_MESSAGES[category]
    return title, body.format(**settings.to_dict())


class ReminderScheduler:
    """
    Polls the clock on a background thread and fires reminders.

    The settings provider is called once per tick and must return an
    immutable snapshot (SettingsManager.snapshot). The lock behind it is
    only held for that call; clock reads and notification delivery
    happen outside it.
    """

    def __init__(
        self,
        settings_provider: Callable[[], ReminderSettings],
        notifier=None,
        clock: Callable[[], datetime] = datetime.now,
        poll_interval: Optional[float] = None,
    ) -> None:
        """
        Initialise the scheduler (not started).

        Args:
            settings_provider: Returns the current settings snapshot.
            notifier: Object with notify(title, body). None disables delivery.
            clock: Returns the current local time.
            poll_interval: Seconds between ticks (config.POLL_INTERVAL_SECONDS).
        """
        self.settings_provider = settings_provider
        self.notifier = notifier
        self.clock = clock
        self.poll_interval: float = poll_interval or config.POLL_INTERVAL_SECONDS

        self.is_running: bool = False
        self.should_stop: threading.Event = threading.Event()
        self.thread: Optional[threading.Thread] = None

        self.last_tick_time: Optional[datetime] = None
        self.last_reminder: Optional[str] = None
        self.last_reminder_time: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """
        Start the polling thread.

        Returns:
            False if the scheduler is already running.
        """
        if self.is_running:
            logger.debug("Scheduler already running")
            return False

        # Each thread owns its stop event; a thread that outlived stop() still exits
        self.should_stop = threading.Event()
        self.is_running = True
        self.thread = threading.Thread(
            target=self._loop,
            args=(self.should_stop,),
            name="ReminderScheduler",
            daemon=True,
        )
        self.thread.start()
        return True

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the loop to stop and wait for the thread to finish."""
        self.should_stop.set()
        if self.thread and self.thread.is_alive() and self.thread is not threading.current_thread():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning("Scheduler thread did not stop within timeout")
        self.thread = None
        self.is_running = False

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def run_tick(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Evaluate one tick and deliver the reminder if one is due.

        Args:
            now: Time to evaluate (defaults to the clock).

        Returns:
            The category fired, or None.
        """
        settings = self.settings_provider()
        now = (now or self.clock()).replace(second=0, microsecond=0)
        category = decide_reminder(now, settings)
        self.last_tick_time = now

        if category is None:
            logger.debug(f"Tick {now:%a %H:%M}: no reminder")
            return None

        logger.info(f"Tick {now:%a %H:%M}: {category}")
        self.last_reminder = category
        self.last_reminder_time = now
        self._deliver(category, settings)
        return category

    def _deliver(self, category: str, settings: ReminderSettings) -> None:
        """Send a reminder to the notifier. Failures are logged, not raised."""
        if self.notifier is None:
            return
        title, body = build_message(category, settings)
        try:
            self.notifier.notify(title, body)
        except Exception as e:
            logger.warning(f"Failed to deliver {category} reminder: {e}")

    def _seconds_until_next_tick(self) -> float:
        """Wait time to the next interval boundary on the wall clock."""
        interval = self.poll_interval
        return interval - (time.time() % interval) + _TICK_SLACK_SECONDS

    def _loop(self, should_stop: threading.Event) -> None:
        """Polling loop. Runs until should_stop is set."""
        logger.info(f"Reminder scheduler started (every {self.poll_interval}s)")
        try:
            while not should_stop.is_set():
                try:
                    self.run_tick()
                except Exception as e:
                    # One bad tick must not end the loop
                    logger.error(f"Reminder tick failed: {e}", exc_info=True)

                if should_stop.wait(self._seconds_until_next_tick()):
                    break
        finally:
            if self.should_stop is should_stop:
                self.is_running = False
            logger.info("Reminder scheduler stopped")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self, now: Optional[datetime] = None) -> Dict:
        """
        Get a snapshot of scheduler state for display.

        Returns:
            Dict with is_running, state (STATE_* label), settings summary,
            last tick/reminder and the next reminder as (datetime, category)
            or None.
        """
        settings = self.settings_provider()
        now = now or self.clock()
        return {
            "is_running": self.is_running,
            "state": current_state(now, settings),
            "settings": settings.describe(),
            "last_tick_time": self.last_tick_time,
            "last_reminder": self.last_reminder,
            "last_reminder_time": self.last_reminder_time,
            "next_reminder": find_next_reminder(now, settings),
        }
