"""Abstract base class for git operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for the git queries stack-status needs."""

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str:
        """Get the currently checked-out branch.

        Args:
            cwd: Directory inside the repository

        Returns:
            Branch name

        Raises:
            FetcherUnavailable: If git is missing, cwd is not a repository,
                or HEAD is detached
        """
        ...
