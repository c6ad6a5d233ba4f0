"""Console notifier used by headless (--cli) mode."""

import logging
from datetime import datetime

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Prints reminders to the terminal."""

    def __init__(self, bell: bool = True) -> None:
        self.bell = bell

    def notify(self, title: str, body: str) -> None:
        """Print a reminder line, ringing the terminal bell if enabled."""
        stamp = datetime.now().strftime("%H:%M")
        prefix = "\a" if self.bell else ""
        print(f"{prefix}[{stamp}] {title} - {body}", flush=True)
        logger.debug(f"Console reminder shown: {title}")
