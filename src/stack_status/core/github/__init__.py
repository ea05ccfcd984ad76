"""GitHub CLI (gh) integration for pull request numbers and CI checks."""

from stack_status.core.github.abc import GitHub
from stack_status.core.github.parsing import (
    aggregate_check_lists,
    parse_gh_pr_checks,
    parse_gh_pr_list,
)
from stack_status.core.github.real import RealGitHub

__all__ = [
    "GitHub",
    "RealGitHub",
    "aggregate_check_lists",
    "parse_gh_pr_checks",
    "parse_gh_pr_list",
]
