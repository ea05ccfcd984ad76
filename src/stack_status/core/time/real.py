"""Real time implementation using the system clock."""

import time
from datetime import datetime

from stack_status.core.time.abc import Time


class RealTime(Time):
    """Production implementation using time.sleep() and datetime.now()."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def now(self) -> datetime:
        return datetime.now().astimezone()
