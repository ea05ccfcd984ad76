"""Error taxonomy for stack-status.

All errors are recoverable at the boundary that owns the operation:

- FetcherUnavailable: an external tool (gt, gh, git) is missing, timed out or
  failed. Callers degrade rendering instead of aborting.
- ParseError: an available tool produced output with an unexpected shape.
- NotFound: a requested branch is not part of the current snapshot.
"""


class StackStatusError(Exception):
    """Base class for all stack-status errors."""


class FetcherUnavailable(StackStatusError):
    """An external command-line tool could not provide data."""

    def __init__(self, tool: str, reason: str) -> None:
        super().__init__(f"{tool} unavailable: {reason}")
        self.tool = tool
        self.reason = reason


class ParseError(StackStatusError):
    """Output from an external tool did not match the expected shape."""


class NotFound(StackStatusError):
    """A branch name does not exist in the current snapshot."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"Branch '{branch}' not found in stack")
        self.branch = branch
