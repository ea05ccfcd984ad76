"""Parsing for `gt log short` output.

Example output for a forked stack (tips first, trunk last):

    ◯ feature-b
    │ ◉ feature-c
    ├─┘
    ◯ feature-a
    ◯ main

Each branch line carries a marker: ◉ for the checked-out branch, ◯ or ● for
the others. The marker's column is the branch's lane. A branch's parent is the
nearest branch printed below it whose lane is not to its right.
"""

import re
from dataclasses import dataclass

from stack_status.core.errors import ParseError
from stack_status.core.types import StackEntry

CURRENT_MARKER = "◉"
BRANCH_MARKERS = frozenset({"◉", "◯", "●"})
CONNECTOR_CHARS = frozenset("│├┤┼─┘┐┌└┴┬╯╮╭╰ \t")

_PR_NUMBER_RE = re.compile(r"(?:PR\s*)?\(?#(\d+)\)?")


@dataclass(frozen=True)
class _BranchLine:
    name: str
    lane: int
    is_current: bool
    pr_number: int | None


def _parse_branch_line(line: str, line_number: int) -> _BranchLine | None:
    marker_pos = next((i for i, ch in enumerate(line) if ch in BRANCH_MARKERS), None)
    if marker_pos is None:
        if set(line) <= CONNECTOR_CHARS:
            return None
        raise ParseError(f"Unexpected line {line_number} in gt output: {line.strip()!r}")

    rest = line[marker_pos + 1 :].split()
    if not rest:
        raise ParseError(f"Branch marker without a name on line {line_number} of gt output")

    name, annotations = rest[0], " ".join(rest[1:])
    pr_match = _PR_NUMBER_RE.search(annotations)
    return _BranchLine(
        name=name,
        lane=marker_pos // 2,
        is_current=line[marker_pos] == CURRENT_MARKER,
        pr_number=int(pr_match.group(1)) if pr_match else None,
    )


def _branch_lines(output: str) -> list[_BranchLine]:
    lines: list[_BranchLine] = []
    for line_number, line in enumerate(output.splitlines(), start=1):
        parsed = _parse_branch_line(line.rstrip(), line_number)
        if parsed is not None:
            lines.append(parsed)
    return lines


def parse_gt_log_short(output: str) -> list[StackEntry]:
    """Parse `gt log short` output into stack entries, trunk first.

    Args:
        output: Raw stdout of `gt log short`

    Returns:
        Entries ordered so every parent precedes its children. Empty output
        yields an empty list.

    Raises:
        ParseError: If a line is neither a branch nor a connector, a marker
            has no branch name, or a branch is listed twice
    """
    lines = _branch_lines(output)

    seen: set[str] = set()
    for line in lines:
        if line.name in seen:
            raise ParseError(f"Branch '{line.name}' listed twice in gt output")
        seen.add(line.name)

    entries: list[StackEntry] = []
    for i, line in enumerate(lines):
        parent = next((below.name for below in lines[i + 1 :] if below.lane <= line.lane), None)
        entries.append(StackEntry(name=line.name, pr_number=line.pr_number, parent=parent))

    entries.reverse()
    return entries


def find_current_branch(output: str) -> str | None:
    """Return the branch gt marks as checked out, or None if none is marked."""
    for line in _branch_lines(output):
        if line.is_current:
            return line.name
    return None
