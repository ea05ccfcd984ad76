"""Value types shared by the parsers and the model builder."""

from dataclasses import dataclass
from enum import Enum


class CheckState(str, Enum):
    """State of a single CI check.

    UNKNOWN is the catch-all for states the GitHub CLI reports that we do not
    recognize. It is aggregated like QUEUED so no check is silently dropped.
    """

    PASSED = "passed"
    FAILED = "failed"
    RUNNING = "running"
    QUEUED = "queued"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def is_complete(self) -> bool:
        return self in (CheckState.PASSED, CheckState.FAILED)


class BranchRole(str, Enum):
    """Role of a branch within one stack snapshot."""

    CURRENT = "current"
    STACK_MEMBER = "stack_member"
    TRUNK = "trunk"


@dataclass(frozen=True)
class CheckResult:
    """One CI check reported for a branch's latest commit.

    duration_seconds is only set for completed checks (PASSED or FAILED).
    """

    name: str
    state: CheckState
    duration_seconds: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class PullRequestInfo:
    """A pull request as listed by `gh pr list`.

    state is GitHub's PR state: OPEN, CLOSED or MERGED.
    """

    number: int
    url: str | None
    state: str


@dataclass(frozen=True)
class StackEntry:
    """One branch as listed by the stack tool, trunk-to-tip ordered."""

    name: str
    pr_number: int | None
    parent: str | None
    pr_url: str | None = None
