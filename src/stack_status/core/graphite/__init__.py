"""Graphite CLI (gt) integration.

Provides the stack listing abstraction and the parser that turns
`gt log short` output into ordered stack entries.
"""

from stack_status.core.graphite.abc import Graphite
from stack_status.core.graphite.parsing import find_current_branch, parse_gt_log_short
from stack_status.core.graphite.real import RealGraphite

__all__ = ["Graphite", "RealGraphite", "find_current_branch", "parse_gt_log_short"]
