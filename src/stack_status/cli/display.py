"""Text rendering of stack snapshots.

Renders the forest with rich: a header panel, a summary of the current
lineage, then one tree per root branch. The result is returned as a string
with ANSI styles so callers can route it through click (which strips styles
when the output is not a terminal).
"""

import io

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from stack_status.cli.output import format_duration
from stack_status.core.forest import BranchForest, BranchNode, StackSnapshot
from stack_status.core.status import AggregateStatus, summarize_stack
from stack_status.core.types import BranchRole, CheckResult, CheckState

STATE_ICONS = {
    CheckState.PASSED: "✓",
    CheckState.FAILED: "✗",
    CheckState.RUNNING: "◐",
    CheckState.QUEUED: "○",
    CheckState.SKIPPED: "○",
    CheckState.CANCELLED: "⊘",
    CheckState.UNKNOWN: "○",
}

STATE_STYLES = {
    CheckState.PASSED: "green",
    CheckState.FAILED: "red",
    CheckState.RUNNING: "yellow",
    CheckState.QUEUED: "bright_black",
    CheckState.SKIPPED: "bright_black",
    CheckState.CANCELLED: "bright_black",
    CheckState.UNKNOWN: "bright_black",
}

ROLE_ICONS = {
    BranchRole.TRUNK: ("●", "bright_black"),
    BranchRole.CURRENT: ("◉", "blue"),
    BranchRole.STACK_MEMBER: ("◯", "dim"),
}


def _status_text(aggregate: AggregateStatus) -> Text:
    if aggregate.total_count == 0:
        return Text("? no checks", style="bright_black")
    style = STATE_STYLES[aggregate.status]
    return Text(f"{STATE_ICONS[aggregate.status]} {aggregate.summary_text()}", style=style)


def _branch_label(node: BranchNode) -> Text:
    icon, icon_style = ROLE_ICONS[node.role]
    label = Text()
    label.append(icon, style=icon_style)
    label.append(" ")
    label.append(node.name, style="bold" if node.role == BranchRole.CURRENT else None)
    if node.pr_number is not None:
        pr_style = f"dim link {node.pr_url}" if node.pr_url else "dim"
        label.append(f" (#{node.pr_number})", style=pr_style)

    if node.role == BranchRole.TRUNK and not node.checks:
        return label
    label.append("  ")
    if node.pr_number is None and not node.checks:
        label.append("no PR", style="dim")
    else:
        label.append_text(_status_text(node.aggregate))
    return label


def _check_label(check: CheckResult) -> Text:
    style = STATE_STYLES[check.state]
    label = Text(f"{STATE_ICONS[check.state]} {check.name}", style=style)
    if check.duration_seconds is not None:
        label.append(f" ({format_duration(check.duration_seconds)})", style="dim")
    return label


def _add_branch(tree: Tree, forest: BranchForest, node: BranchNode, *, details: bool) -> None:
    if details:
        for check in node.checks:
            tree.add(_check_label(check))
    for child in forest.children_of(node):
        subtree = tree.add(_branch_label(child))
        _add_branch(subtree, forest, child, details=details)


def build_forest_trees(forest: BranchForest, *, details: bool) -> list[Tree]:
    """Build one rich Tree per root branch."""
    trees: list[Tree] = []
    for root_index in forest.roots:
        root = forest.nodes[root_index]
        tree = Tree(_branch_label(root), guide_style="dim")
        _add_branch(tree, forest, root, details=details)
        trees.append(tree)
    return trees


def render_snapshot(
    snapshot: StackSnapshot,
    *,
    details: bool,
    width: int = 100,
    footer: str | None = None,
) -> str:
    """Render a snapshot as styled text.

    Args:
        snapshot: Snapshot to render
        details: Whether to list each CI check under its branch
        width: Console width in columns
        footer: Optional help line printed after the tree (watch mode)

    Returns:
        Rendered text including ANSI style codes
    """
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="standard",
        width=width,
        highlight=False,
    )

    header = Text()
    header.append("Stack Status", style="bold")
    header.append("    Updated: ")
    header.append(snapshot.generated_at.strftime("%H:%M:%S"), style="cyan")
    console.print(Panel(header, border_style="dim", expand=False))

    for notice in snapshot.notices:
        console.print(Text(f"! {notice}", style="yellow"))

    forest = snapshot.forest
    if not forest.nodes:
        console.print(Text("No branches found", style="dim"))
    else:
        summary = summarize_stack(forest)
        if summary.branches and summary.aggregate.total_count > 0:
            line = Text("Current stack: ")
            line.append_text(_status_text(summary.aggregate))
            console.print(line)
        console.print()
        for tree in build_forest_trees(forest, details=details):
            console.print(tree)

    if footer is not None:
        console.print()
        console.print(Text(footer, style="dim"))

    return buffer.getvalue().rstrip("\n")
