"""Collect one stack snapshot from the external tools.

One call is one refresh cycle: fetch the stack listing, fetch CI checks for
the branches in it, and build an immutable forest. Unavailable tools degrade
the snapshot (recorded as notices); malformed output raises ParseError.
"""

import logging
from dataclasses import replace

from stack_status.core.context import StackStatusContext
from stack_status.core.errors import FetcherUnavailable, NotFound
from stack_status.core.forest import StackSnapshot
from stack_status.core.github.parsing import aggregate_check_lists
from stack_status.core.graphite.parsing import find_current_branch, parse_gt_log_short
from stack_status.core.model_builder import build_forest
from stack_status.core.types import CheckResult, PullRequestInfo, StackEntry

logger = logging.getLogger(__name__)


def _git_current_branch(ctx: StackStatusContext) -> str | None:
    try:
        return ctx.git.get_current_branch(ctx.cwd)
    except FetcherUnavailable as e:
        logger.debug("Current branch unavailable: %s", e)
        return None


def _fetch_entries(
    ctx: StackStatusContext, branch_override: str | None, notices: list[str]
) -> tuple[list[StackEntry], str | None, bool]:
    """Return (entries, current branch, stack available)."""
    try:
        listing = ctx.graphite.get_stack_listing(ctx.cwd)
    except FetcherUnavailable as e:
        logger.debug("Falling back to single branch: %s", e)
        notices.append(f"Graphite CLI (gt) unavailable: {e.reason}. Showing current branch only.")
        if branch_override is not None:
            notices.append(f"Branch '{branch_override}' could not be checked against the stack.")
            branch = branch_override
        else:
            branch = _git_current_branch(ctx)
        if branch is None:
            return [], None, False
        return [StackEntry(name=branch, pr_number=None, parent=None)], branch, False

    entries = parse_gt_log_short(listing)
    names = {entry.name for entry in entries}

    if branch_override is not None:
        if branch_override not in names:
            raise NotFound(branch_override)
        return entries, branch_override, True

    current = find_current_branch(listing)
    if current is None:
        git_branch = _git_current_branch(ctx)
        if git_branch in names:
            current = git_branch
    return entries, current, True


def _with_pull_request(entry: StackEntry, pull_request: PullRequestInfo | None) -> StackEntry:
    """Fill PR number and URL from gh, keeping a PR number gt already reported."""
    if pull_request is None:
        return entry
    if entry.pr_number is None:
        return replace(entry, pr_number=pull_request.number, pr_url=pull_request.url)
    if entry.pr_number == pull_request.number:
        return replace(entry, pr_url=pull_request.url)
    return entry


def _fetch_checks(
    ctx: StackStatusContext, entries: list[StackEntry], notices: list[str]
) -> tuple[list[StackEntry], dict[str, list[CheckResult]], bool]:
    """Return (entries with PR numbers, checks by branch, checks available)."""
    trunk_names = set(ctx.config.trunk_names)
    candidates = [e for e in entries if e.parent is not None or e.name not in trunk_names]
    if not candidates:
        return entries, {}, True

    try:
        pull_requests = ctx.github.get_pull_requests(ctx.cwd)
        entries = [_with_pull_request(entry, pull_requests.get(entry.name)) for entry in entries]
        candidate_names = {c.name for c in candidates}
        with_pr = {
            e.name: e.pr_number
            for e in entries
            if e.name in candidate_names and e.pr_number is not None
        }
        raw = ctx.github.get_check_listings(ctx.cwd, with_pr) if with_pr else {}
    except FetcherUnavailable as e:
        logger.debug("CI checks unavailable: %s", e)
        notices.append(f"GitHub CLI (gh) unavailable: {e.reason}. CI checks not shown.")
        return entries, {}, False

    return entries, aggregate_check_lists(raw), True


def collect_snapshot(ctx: StackStatusContext, branch_override: str | None = None) -> StackSnapshot:
    """Build a fresh snapshot of the stack and its CI status.

    Args:
        ctx: Application context
        branch_override: Branch to treat as current instead of the checked-out one

    Returns:
        Immutable snapshot; never partially built

    Raises:
        ParseError: If gt or gh produced malformed output
        NotFound: If branch_override is not part of the stack
    """
    notices: list[str] = []
    entries, current, stack_available = _fetch_entries(ctx, branch_override, notices)
    entries, checks, checks_available = _fetch_checks(ctx, entries, notices)

    forest = build_forest(
        entries,
        checks,
        current_branch=current,
        trunk_names=ctx.config.trunk_names,
    )
    logger.debug(
        "Built forest: %d branches, current=%s, stack=%s, checks=%s",
        len(forest.nodes),
        current,
        stack_available,
        checks_available,
    )
    return StackSnapshot(
        forest=forest,
        generated_at=ctx.time.now(),
        stack_available=stack_available,
        checks_available=checks_available,
        notices=tuple(notices),
    )
