"""Production implementation of Graphite operations."""

import logging
import subprocess
from pathlib import Path

from stack_status.core.errors import FetcherUnavailable
from stack_status.core.graphite.abc import Graphite
from stack_status.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGraphite(Graphite):
    """Production implementation using the gt CLI."""

    def __init__(self, *, timeout: float) -> None:
        """Initialize RealGraphite.

        Args:
            timeout: Seconds to wait for gt before treating it as unavailable
        """
        self._timeout = timeout

    def get_stack_listing(self, cwd: Path) -> str:
        """Run `gt log short` and return its stdout.

        Note: Uses try/except as an acceptable error boundary. A missing or
        uninitialized gt is indistinguishable from a failing one without
        duplicating gt's own checks, and all of them degrade the same way.
        """
        cmd = ["gt", "log", "short"]
        logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            result = run_subprocess_with_context(
                cmd,
                operation_context="list Graphite stack",
                cwd=cwd,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FetcherUnavailable("gt", f"timed out after {self._timeout}s") from e
        except RuntimeError as e:
            logger.debug("gt log short failed: %s", e)
            raise FetcherUnavailable("gt", str(e).splitlines()[0]) from e

        return result.stdout
