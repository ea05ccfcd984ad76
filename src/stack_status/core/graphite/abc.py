"""Abstract base class for Graphite operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class Graphite(ABC):
    """Abstract interface for Graphite operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_stack_listing(self, cwd: Path) -> str:
        """Get the raw stack listing for the repository at cwd.

        Args:
            cwd: Directory inside the repository

        Returns:
            Raw `gt log short` output, tips first and trunk last

        Raises:
            FetcherUnavailable: If gt is not installed, not initialized for
                this repository, times out or exits with an error
        """
        ...
