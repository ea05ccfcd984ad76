"""Pydantic models for the JSON form of a stack snapshot.

The same schema is used by `stack-status --json` and by the MCP server's
get_stack_status tool. parse_stack_status_json() turns the JSON back into a
StackSnapshot equal to the one that was serialized.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stack_status.core.forest import BranchForest, BranchNode, StackSnapshot
from stack_status.core.status import AggregateStatus, summarize_stack
from stack_status.core.types import BranchRole, CheckResult, CheckState

CheckStateName = Literal["passed", "failed", "running", "queued", "skipped", "cancelled", "unknown"]
BranchRoleName = Literal["current", "stack_member", "trunk"]


class CheckResultSchema(BaseModel):
    """One CI check in JSON output."""

    model_config = ConfigDict(strict=True)

    name: str
    state: CheckStateName
    duration_seconds: int | None = Field(default=None, ge=0)
    url: str | None = None


class AggregateSchema(BaseModel):
    """Aggregate status of a set of checks.

    Attributes:
        status: Highest-priority state among the checks
        passed_count: Number of passed checks
        total_count: Number of checks of any state
    """

    model_config = ConfigDict(strict=True)

    status: CheckStateName
    passed_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    failed_count: int = Field(ge=0)
    running_count: int = Field(ge=0)
    queued_count: int = Field(ge=0)
    skipped_count: int = Field(ge=0)
    cancelled_count: int = Field(ge=0)
    summary: str


class BranchSchema(BaseModel):
    """One branch of the stack, with links by branch name."""

    model_config = ConfigDict(strict=True)

    name: str
    pr_number: int | None
    pr_url: str | None
    role: BranchRoleName
    parent: str | None
    children: list[str]
    checks: list[CheckResultSchema]
    aggregate: AggregateSchema


class StackSummarySchema(BaseModel):
    """Status of the current branch's lineage."""

    model_config = ConfigDict(strict=True)

    branches: list[str]
    aggregate: AggregateSchema
    is_complete: bool


class StackStatusResponse(BaseModel):
    """JSON response schema for `stack-status --json` and get_stack_status.

    Attributes:
        generated_at: When the snapshot was assembled
        current_branch: Name of the CURRENT branch, if any
        stack_available: False when gt was unavailable
        checks_available: False when gh was unavailable
        notices: Degraded-mode messages
        roots: Names of root branches
        branches: All branches in trunk-to-tip order
        summary: Aggregate of the current lineage
    """

    model_config = ConfigDict(strict=True)

    generated_at: datetime
    current_branch: str | None
    stack_available: bool
    checks_available: bool
    notices: list[str]
    roots: list[str]
    branches: list[BranchSchema]
    summary: StackSummarySchema


def aggregate_to_pydantic(aggregate: AggregateStatus) -> AggregateSchema:
    return AggregateSchema(
        status=aggregate.status.value,
        passed_count=aggregate.passed_count,
        total_count=aggregate.total_count,
        failed_count=aggregate.failed_count,
        running_count=aggregate.running_count,
        queued_count=aggregate.queued_count,
        skipped_count=aggregate.skipped_count,
        cancelled_count=aggregate.cancelled_count,
        summary=aggregate.summary_text(),
    )


def check_to_pydantic(check: CheckResult) -> CheckResultSchema:
    return CheckResultSchema(
        name=check.name,
        state=check.state.value,
        duration_seconds=check.duration_seconds,
        url=check.url,
    )


def branch_to_pydantic(forest: BranchForest, node: BranchNode) -> BranchSchema:
    parent = forest.parent_of(node)
    return BranchSchema(
        name=node.name,
        pr_number=node.pr_number,
        pr_url=node.pr_url,
        role=node.role.value,
        parent=parent.name if parent is not None else None,
        children=[child.name for child in forest.children_of(node)],
        checks=[check_to_pydantic(check) for check in node.checks],
        aggregate=aggregate_to_pydantic(node.aggregate),
    )


def snapshot_to_pydantic(snapshot: StackSnapshot) -> StackStatusResponse:
    """Convert a snapshot to its validated JSON model."""
    forest = snapshot.forest
    current = forest.current_node
    summary = summarize_stack(forest)
    return StackStatusResponse(
        generated_at=snapshot.generated_at,
        current_branch=current.name if current is not None else None,
        stack_available=snapshot.stack_available,
        checks_available=snapshot.checks_available,
        notices=list(snapshot.notices),
        roots=[forest.nodes[index].name for index in forest.roots],
        branches=[branch_to_pydantic(forest, node) for node in forest.nodes],
        summary=StackSummarySchema(
            branches=list(summary.branches),
            aggregate=aggregate_to_pydantic(summary.aggregate),
            is_complete=summary.is_complete,
        ),
    )


def pydantic_to_snapshot(response: StackStatusResponse) -> StackSnapshot:
    """Rebuild a snapshot from its JSON model.

    Aggregates are not read back; they are recomputed from the checks.
    """
    index_by_name = {branch.name: i for i, branch in enumerate(response.branches)}
    nodes = tuple(
        BranchNode(
            index=i,
            name=branch.name,
            pr_number=branch.pr_number,
            pr_url=branch.pr_url,
            role=BranchRole(branch.role),
            parent=index_by_name[branch.parent] if branch.parent is not None else None,
            children=tuple(index_by_name[child] for child in branch.children),
            checks=tuple(
                CheckResult(
                    name=check.name,
                    state=CheckState(check.state),
                    duration_seconds=check.duration_seconds,
                    url=check.url,
                )
                for check in branch.checks
            ),
        )
        for i, branch in enumerate(response.branches)
    )
    current = (
        index_by_name[response.current_branch] if response.current_branch is not None else None
    )
    return StackSnapshot(
        forest=BranchForest(
            nodes=nodes,
            roots=tuple(index_by_name[root] for root in response.roots),
            current=current,
        ),
        generated_at=response.generated_at,
        stack_available=response.stack_available,
        checks_available=response.checks_available,
        notices=tuple(response.notices),
    )


def parse_stack_status_json(text: str) -> StackSnapshot:
    """Parse JSON produced by snapshot_to_pydantic() back into a snapshot.

    Raises:
        pydantic.ValidationError: If text does not match StackStatusResponse
    """
    return pydantic_to_snapshot(StackStatusResponse.model_validate_json(text))
