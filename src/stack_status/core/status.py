"""Status aggregation over CI checks.

Aggregates are pure functions of a check sequence: two nodes with the same
checks always produce the same AggregateStatus.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stack_status.core.types import CheckResult, CheckState

if TYPE_CHECKING:
    from stack_status.core.forest import BranchForest


@dataclass(frozen=True)
class AggregateStatus:
    """Worst/most relevant state among a set of checks, with counts."""

    status: CheckState
    passed_count: int
    total_count: int
    failed_count: int = 0
    running_count: int = 0
    queued_count: int = 0
    skipped_count: int = 0
    cancelled_count: int = 0

    @property
    def is_complete(self) -> bool:
        """True when no check is still running or waiting to run."""
        return self.running_count == 0 and self.queued_count == 0

    def summary_text(self) -> str:
        """Short human summary, e.g. "2 failed", "3/5 running", "5/5 passed"."""
        if self.failed_count > 0:
            return f"{self.failed_count} failed"
        if not self.is_complete:
            return f"{self.passed_count}/{self.total_count} running"
        if self.total_count == 0:
            return "no checks"
        if self.passed_count > 0:
            return f"{self.passed_count}/{self.total_count} passed"
        return f"0/{self.total_count} passed"


def _status_from_counts(
    *, passed: int, failed: int, running: int, queued: int, cancelled: int
) -> CheckState:
    if failed > 0:
        return CheckState.FAILED
    if running > 0:
        return CheckState.RUNNING
    if queued > 0:
        return CheckState.QUEUED
    if cancelled > 0:
        return CheckState.CANCELLED
    if passed > 0:
        return CheckState.PASSED
    return CheckState.UNKNOWN


def aggregate_checks(checks: Sequence[CheckResult]) -> AggregateStatus:
    """Compute the aggregate status of one branch's checks.

    Priority, highest first: FAILED, RUNNING, QUEUED (including UNKNOWN),
    CANCELLED, PASSED. Skipped checks are neutral, so a node whose checks are all
    skipped aggregates to UNKNOWN, the same as a node without checks.
    """
    counts = {state: 0 for state in CheckState}
    for check in checks:
        counts[check.state] += 1

    queued = counts[CheckState.QUEUED] + counts[CheckState.UNKNOWN]
    return AggregateStatus(
        status=_status_from_counts(
            passed=counts[CheckState.PASSED],
            failed=counts[CheckState.FAILED],
            running=counts[CheckState.RUNNING],
            queued=queued,
            cancelled=counts[CheckState.CANCELLED],
        ),
        passed_count=counts[CheckState.PASSED],
        total_count=len(checks),
        failed_count=counts[CheckState.FAILED],
        running_count=counts[CheckState.RUNNING],
        queued_count=queued,
        skipped_count=counts[CheckState.SKIPPED],
        cancelled_count=counts[CheckState.CANCELLED],
    )


def combine_aggregates(aggregates: Iterable[AggregateStatus]) -> AggregateStatus:
    """Merge several node aggregates with the same priority rules."""
    passed = failed = running = queued = skipped = cancelled = total = 0
    for aggregate in aggregates:
        passed += aggregate.passed_count
        failed += aggregate.failed_count
        running += aggregate.running_count
        queued += aggregate.queued_count
        skipped += aggregate.skipped_count
        cancelled += aggregate.cancelled_count
        total += aggregate.total_count

    return AggregateStatus(
        status=_status_from_counts(
            passed=passed,
            failed=failed,
            running=running,
            queued=queued,
            cancelled=cancelled,
        ),
        passed_count=passed,
        total_count=total,
        failed_count=failed,
        running_count=running,
        queued_count=queued,
        skipped_count=skipped,
        cancelled_count=cancelled,
    )


@dataclass(frozen=True)
class StackSummary:
    """Status of the current branch's lineage, reported apart from node statuses.

    Attributes:
        branches: Branch names on the current lineage, trunk to tip
        aggregate: Combined aggregate of those branches' checks
        is_complete: True when no check anywhere in the forest is running or queued
    """

    branches: tuple[str, ...]
    aggregate: AggregateStatus
    is_complete: bool


def summarize_stack(forest: "BranchForest") -> StackSummary:
    """Summarize the current lineage of a forest.

    When the forest has no current branch the lineage is empty and the
    aggregate is UNKNOWN with zero counts.
    """
    lineage = forest.lineage(forest.current) if forest.current is not None else ()
    nodes = [forest.nodes[index] for index in lineage]
    return StackSummary(
        branches=tuple(node.name for node in nodes),
        aggregate=combine_aggregates(node.aggregate for node in nodes),
        is_complete=all(node.aggregate.is_complete for node in forest.nodes),
    )
