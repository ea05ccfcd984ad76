"""Production implementation of GitHub operations using the gh CLI."""

import logging
import subprocess
from collections.abc import Mapping
from pathlib import Path

from stack_status.core.errors import FetcherUnavailable
from stack_status.core.github.abc import GitHub
from stack_status.core.github.parsing import (
    CHECK_JSON_FIELDS,
    PR_LIST_JSON_FIELDS,
    parse_gh_pr_list,
)
from stack_status.core.subprocess import run_subprocess_with_context
from stack_status.core.types import PullRequestInfo

logger = logging.getLogger(__name__)

# gh pr checks exits 1 when a check failed and 8 when checks are pending;
# both still print the JSON listing.
_CHECKS_EXIT_CODES_WITH_OUTPUT = frozenset({0, 1, 8})

_NO_CHECKS_MARKERS = (
    "no checks reported",
    "no pull requests found",
    "no open pull requests found",
)


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess.
    """

    def __init__(self, *, timeout: float) -> None:
        """Initialize RealGitHub.

        Args:
            timeout: Seconds to wait for each gh call before treating gh as unavailable
        """
        self._timeout = timeout

    def get_pull_requests(self, cwd: Path) -> dict[str, PullRequestInfo]:
        """Return PRs of any state keyed by head branch.

        Note: Uses try/except as an acceptable error boundary for handling gh CLI
        availability and authentication. We cannot reliably check gh installation
        and authentication status a priori without duplicating gh's logic.
        """
        cmd = [
            "gh",
            "pr",
            "list",
            "--state",
            "all",
            "--json",
            PR_LIST_JSON_FIELDS,
            "--limit",
            "200",
        ]
        stdout = self._run(cmd, operation_context="list pull requests", cwd=cwd)
        return parse_gh_pr_list(stdout)

    def get_check_listings(self, cwd: Path, pr_numbers: Mapping[str, int]) -> dict[str, str]:
        listings: dict[str, str] = {}
        for branch, pr_number in pr_numbers.items():
            listings[branch] = self._get_check_listing(cwd, branch, pr_number)
        return listings

    def _get_check_listing(self, cwd: Path, branch: str, pr_number: int) -> str:
        cmd = ["gh", "pr", "checks", str(pr_number), "--json", CHECK_JSON_FIELDS]
        logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            result = run_subprocess_with_context(
                cmd,
                operation_context=f"get checks for branch '{branch}'",
                cwd=cwd,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise FetcherUnavailable("gh", f"timed out after {self._timeout}s") from e
        except RuntimeError as e:
            raise FetcherUnavailable("gh", str(e).splitlines()[0]) from e

        stdout = result.stdout.strip()
        if result.returncode in _CHECKS_EXIT_CODES_WITH_OUTPUT and stdout:
            return stdout

        stderr = result.stderr.strip()
        if any(marker in stderr.lower() for marker in _NO_CHECKS_MARKERS) or (
            result.returncode == 0 and not stdout
        ):
            logger.debug("No checks for %s: %s", branch, stderr)
            return "[]"

        logger.debug("gh pr checks failed for %s (exit %d): %s", branch, result.returncode, stderr)
        raise FetcherUnavailable("gh", stderr or f"gh pr checks exited with {result.returncode}")

    def _run(self, cmd: list[str], *, operation_context: str, cwd: Path) -> str:
        logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            result = run_subprocess_with_context(
                cmd,
                operation_context=operation_context,
                cwd=cwd,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FetcherUnavailable("gh", f"timed out after {self._timeout}s") from e
        except RuntimeError as e:
            logger.debug("gh command failed: %s", e)
            raise FetcherUnavailable("gh", str(e).splitlines()[0]) from e
        return result.stdout
