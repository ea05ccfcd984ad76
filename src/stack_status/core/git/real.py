"""Production implementation of git operations."""

import logging
import subprocess
from pathlib import Path

from stack_status.core.errors import FetcherUnavailable
from stack_status.core.git.abc import Git
from stack_status.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Production implementation using the git CLI."""

    def __init__(self, *, timeout: float) -> None:
        self._timeout = timeout

    def get_current_branch(self, cwd: Path) -> str:
        try:
            result = run_subprocess_with_context(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                operation_context="get current branch",
                cwd=cwd,
                timeout=self._timeout,
            )
        except (RuntimeError, subprocess.TimeoutExpired) as e:
            logger.debug("git current branch lookup failed: %s", e)
            raise FetcherUnavailable("git", str(e).splitlines()[0]) from e

        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            raise FetcherUnavailable("git", "HEAD is detached")
        return branch
