"""Time operations abstraction for testing.

This module provides an ABC for clock and sleep operations so the refresh
loop and snapshot timestamps can be driven by fakes in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified number of seconds.

        Args:
            seconds: Number of seconds to sleep
        """
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Return the current local time as a timezone-aware datetime."""
        ...
