"""Tests for the shared menu bar helpers (no GUI required)."""

import sys
import unittest
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from core.scheduler import STATE_INACTIVE_DAY, STATE_WORK
from menubar import format_status


class TestFormatStatus(unittest.TestCase):
    """Test menu text built from scheduler status."""

    def test_running_with_next_reminder(self):
        status = {
            "is_running": True,
            "state": STATE_WORK,
            "next_reminder": (datetime(2024, 1, 1, 9, 45), config.REMINDER_BREAK_START),
        }
        state_text, next_text = format_status(status)
        self.assertEqual(state_text, "Working")
        self.assertEqual(next_text, "Next: break at Mon 09:45")

    def test_stopped_without_next(self):
        status = {"is_running": False, "state": STATE_INACTIVE_DAY, "next_reminder": None}
        state_text, next_text = format_status(status)
        self.assertEqual(state_text, "Day off (paused)")
        self.assertEqual(next_text, "No upcoming reminders")


if __name__ == "__main__":
    unittest.main()
