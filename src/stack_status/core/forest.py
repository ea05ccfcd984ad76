"""Immutable branch forest and snapshot types.

Nodes live in an arena (a tuple indexed by position). Parent and child links
are arena indices, so a forest is a plain value that can be compared, shared
between presenters and discarded after one refresh cycle.
"""

from dataclasses import dataclass
from datetime import datetime

from stack_status.core.status import AggregateStatus, aggregate_checks
from stack_status.core.types import BranchRole, CheckResult


@dataclass(frozen=True)
class BranchNode:
    """One branch in the forest.

    Attributes:
        index: Position of this node in BranchForest.nodes
        name: Branch name, unique within the forest
        pr_number: Pull request number, None when no PR exists yet
        pr_url: Pull request URL, when gh reported one
        role: CURRENT, TRUNK or STACK_MEMBER
        parent: Arena index of the branch below this one, None for roots
        children: Arena indices of branches stacked on this one, in stack order
        checks: CI checks, empty when unavailable or not yet reported
    """

    index: int
    name: str
    pr_number: int | None
    role: BranchRole
    parent: int | None
    children: tuple[int, ...]
    checks: tuple[CheckResult, ...]
    pr_url: str | None = None

    @property
    def aggregate(self) -> AggregateStatus:
        return aggregate_checks(self.checks)

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(frozen=True)
class BranchForest:
    """Rooted forest of branch chains, in trunk-to-tip insertion order."""

    nodes: tuple[BranchNode, ...]
    roots: tuple[int, ...]
    current: int | None

    @staticmethod
    def empty() -> "BranchForest":
        return BranchForest(nodes=(), roots=(), current=None)

    @property
    def branch_names(self) -> tuple[str, ...]:
        return tuple(node.name for node in self.nodes)

    @property
    def current_node(self) -> BranchNode | None:
        if self.current is None:
            return None
        return self.nodes[self.current]

    def get(self, name: str) -> BranchNode | None:
        """Look up a node by branch name."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def parent_of(self, node: BranchNode) -> BranchNode | None:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def children_of(self, node: BranchNode) -> tuple[BranchNode, ...]:
        return tuple(self.nodes[child] for child in node.children)

    def chain(self, index: int) -> tuple[int, ...]:
        """Arena indices from the root down to (and including) index."""
        path: list[int] = []
        cursor: int | None = index
        while cursor is not None:
            path.append(cursor)
            cursor = self.nodes[cursor].parent
        path.reverse()
        return tuple(path)

    def lineage(self, index: int) -> tuple[int, ...]:
        """Root-to-tip chain through index, following first children above it."""
        path = list(self.chain(index))
        cursor = self.nodes[index]
        while cursor.children:
            cursor = self.nodes[cursor.children[0]]
            path.append(cursor.index)
        return tuple(path)

    def depth(self, node: BranchNode) -> int:
        """Number of ancestors between node and its root (roots have depth 0)."""
        return len(self.chain(node.index)) - 1


@dataclass(frozen=True)
class StackSnapshot:
    """Everything one refresh cycle produced, handed to exactly one presenter.

    Attributes:
        forest: Branch forest built this cycle
        generated_at: Time the snapshot was assembled
        stack_available: False when the stack tool was unavailable
        checks_available: False when CI status was unavailable
        notices: Degraded-mode messages for the user
    """

    forest: BranchForest
    generated_at: datetime
    stack_available: bool
    checks_available: bool
    notices: tuple[str, ...]

    @property
    def is_renderable(self) -> bool:
        """False only when no source produced anything to show."""
        return self.stack_available or bool(self.forest.nodes)
