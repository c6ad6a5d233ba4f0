"""
Core reminder logic for Cadence.

Window evaluation (core.window), the polling scheduler (core.scheduler)
and console delivery (core.notifier). Zero UI dependencies.
"""
