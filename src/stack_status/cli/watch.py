"""Watch mode refresh loop.

Each cycle collects a fresh snapshot, renders it, then sleeps. Only one cycle
is in flight at a time; a failed cycle prints an error line and the loop
continues on the next tick. KeyboardInterrupt is left to the caller, which
treats it as a normal exit.
"""

import logging
from collections.abc import Callable

from stack_status.core.context import StackStatusContext
from stack_status.core.errors import NotFound, ParseError
from stack_status.core.forest import StackSnapshot
from stack_status.core.snapshot import collect_snapshot
from stack_status.core.status import summarize_stack

logger = logging.getLogger(__name__)


def run_watch_loop(
    ctx: StackStatusContext,
    *,
    interval: int,
    branch_override: str | None,
    exit_on_complete: bool,
    render: Callable[[StackSnapshot], None],
    render_error: Callable[[Exception], None],
) -> int:
    """Refresh until interrupted, or until all checks finish with exit_on_complete.

    Args:
        ctx: Application context (its Time drives the sleeps)
        interval: Seconds to sleep between cycles
        branch_override: Branch to treat as current
        exit_on_complete: Stop after a cycle in which no check is running or queued
        render: Presents one snapshot
        render_error: Presents a failed cycle

    Returns:
        Number of cycles completed
    """
    cycles = 0
    while True:
        try:
            snapshot = collect_snapshot(ctx, branch_override)
        except (ParseError, NotFound) as e:
            logger.debug("Refresh cycle %d failed: %s", cycles + 1, e)
            render_error(e)
        else:
            render(snapshot)
            if exit_on_complete and summarize_stack(snapshot.forest).is_complete:
                return cycles + 1
        cycles += 1
        ctx.time.sleep(interval)
