"""Assemble a BranchForest from parsed stack entries and check results."""

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field

from stack_status.core.errors import ParseError
from stack_status.core.forest import BranchForest, BranchNode
from stack_status.core.types import BranchRole, CheckResult, StackEntry

DEFAULT_TRUNK_NAMES = ("main", "master", "develop", "trunk")


@dataclass
class _PendingNode:
    entry: StackEntry
    parent: int | None
    children: list[int] = field(default_factory=list)


def build_forest(
    entries: Sequence[StackEntry],
    checks: Mapping[str, Sequence[CheckResult]],
    *,
    current_branch: str | None,
    trunk_names: Collection[str],
) -> BranchForest:
    """Build the branch forest in one pass over trunk-to-tip ordered entries.

    Args:
        entries: Stack entries; every parent must appear before its children
        checks: Mapping of branch name -> checks (missing branches get no checks)
        current_branch: Branch to mark CURRENT, or None
        trunk_names: Names recognized as trunk branches

    Returns:
        Immutable forest; children keep the order in which entries appear

    Raises:
        ParseError: If a parent is listed after its child or a name repeats
    """
    index_by_name: dict[str, int] = {}
    pending: list[_PendingNode] = []

    for entry in entries:
        if entry.name in index_by_name:
            raise ParseError(f"Branch '{entry.name}' appears more than once in the stack")

        parent_index: int | None = None
        if entry.parent is not None:
            if entry.parent not in index_by_name:
                raise ParseError(
                    f"Inconsistent stack ordering: parent '{entry.parent}' of "
                    f"'{entry.name}' is not listed before it"
                )
            parent_index = index_by_name[entry.parent]

        index = len(pending)
        index_by_name[entry.name] = index
        pending.append(_PendingNode(entry=entry, parent=parent_index))
        if parent_index is not None:
            pending[parent_index].children.append(index)

    roots = tuple(i for i, node in enumerate(pending) if node.parent is None)
    named_trunk_found = any(pending[i].entry.name in trunk_names for i in roots)

    nodes: list[BranchNode] = []
    current: int | None = None
    for index, node in enumerate(pending):
        name = node.entry.name
        if name == current_branch:
            role = BranchRole.CURRENT
            current = index
        elif node.parent is None and (name in trunk_names or not named_trunk_found):
            role = BranchRole.TRUNK
        else:
            role = BranchRole.STACK_MEMBER

        nodes.append(
            BranchNode(
                index=index,
                name=name,
                pr_number=node.entry.pr_number,
                pr_url=node.entry.pr_url,
                role=role,
                parent=node.parent,
                children=tuple(node.children),
                checks=tuple(checks.get(name, ())),
            )
        )

    return BranchForest(nodes=tuple(nodes), roots=roots, current=current)
