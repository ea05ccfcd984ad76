"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from stack_status.core.types import PullRequestInfo


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_pull_requests(self, cwd: Path) -> dict[str, PullRequestInfo]:
        """Get the pull requests of the repository, in any state.

        Args:
            cwd: Directory inside the repository

        Returns:
            Mapping of head branch name -> PR (an open PR wins over closed or
            merged ones for the same branch)

        Raises:
            FetcherUnavailable: If gh is not installed, not authenticated or
                times out
        """
        ...

    @abstractmethod
    def get_check_listings(self, cwd: Path, pr_numbers: Mapping[str, int]) -> dict[str, str]:
        """Get the raw CI check listing for each branch's PR.

        Args:
            cwd: Directory inside the repository
            pr_numbers: Mapping of branch name -> PR number to query

        Returns:
            Mapping of branch name -> raw JSON array as printed by
            `gh pr checks --json`. PRs without reported checks map to "[]".

        Raises:
            FetcherUnavailable: If gh is not installed, not authenticated or
                times out
        """
        ...
