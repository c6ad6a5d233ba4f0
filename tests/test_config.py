"""Tests for environment overrides in config.py."""

import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import config


class TestTimeEnv(unittest.TestCase):
    """Test default start/end time overrides."""

    def test_unset_uses_default(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config._get_time_env("CADENCE_DEFAULT_START_TIME", "09:00"), "09:00")

    def test_valid_value_normalised(self):
        with patch.dict(os.environ, {"CADENCE_DEFAULT_START_TIME": " 7:5 "}):
            self.assertEqual(config._get_time_env("CADENCE_DEFAULT_START_TIME", "09:00"), "07:05")

    def test_invalid_value_falls_back_with_warning(self):
        """A bad override such as 9am must not stop the app from starting."""
        for bad in ("9am", "24:00", "noon"):
            with patch.dict(os.environ, {"CADENCE_DEFAULT_START_TIME": bad}):
                with self.assertLogs("config", level="WARNING"):
                    value = config._get_time_env("CADENCE_DEFAULT_START_TIME", "09:00")
            self.assertEqual(value, "09:00", msg=bad)

    def test_module_defaults_are_valid_times(self):
        """The built-in fallback always builds a valid settings snapshot."""
        from preferences.model import ReminderSettings

        settings = ReminderSettings()
        self.assertEqual(settings.start_time, config.DEFAULT_START_TIME)
        self.assertEqual(settings.end_time, config.DEFAULT_END_TIME)


class TestIntEnv(unittest.TestCase):
    """Test integer overrides."""

    def test_invalid_value_falls_back(self):
        with patch.dict(os.environ, {"CADENCE_POLL_INTERVAL": "soon"}):
            with self.assertLogs("config", level="WARNING"):
                self.assertEqual(config._get_int_env("CADENCE_POLL_INTERVAL", 60, minimum=1), 60)

    def test_below_minimum_falls_back(self):
        with patch.dict(os.environ, {"CADENCE_POLL_INTERVAL": "0"}):
            with self.assertLogs("config", level="WARNING"):
                self.assertEqual(config._get_int_env("CADENCE_POLL_INTERVAL", 60, minimum=1), 60)


if __name__ == "__main__":
    unittest.main()
