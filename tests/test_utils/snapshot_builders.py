"""Builders for stack entries, checks and snapshots used across tests."""

from stack_status.core.forest import StackSnapshot
from stack_status.core.model_builder import DEFAULT_TRUNK_NAMES, build_forest
from stack_status.core.types import CheckResult, CheckState, PullRequestInfo, StackEntry
from tests.fakes.time import DEFAULT_NOW


def check(name: str, state: CheckState, duration: int | None = None) -> CheckResult:
    return CheckResult(name=name, state=state, duration_seconds=duration)


def pr_url(number: int) -> str:
    return f"https://github.com/acme/app/pull/{number}"


def open_prs(numbers: dict[str, int]) -> dict[str, PullRequestInfo]:
    """Open PRs for the given branch -> number mapping, as gh would list them."""
    return {
        branch: PullRequestInfo(number=number, url=pr_url(number), state="OPEN")
        for branch, number in numbers.items()
    }


def linear_entries(
    *names: str, pr_numbers: dict[str, int] | None = None, with_urls: bool = False
) -> list[StackEntry]:
    """Entries for a single chain, trunk first."""
    prs = pr_numbers if pr_numbers is not None else {}
    entries: list[StackEntry] = []
    parent: str | None = None
    for name in names:
        number = prs.get(name)
        url = pr_url(number) if with_urls and number is not None else None
        entries.append(StackEntry(name=name, pr_number=number, parent=parent, pr_url=url))
        parent = name
    return entries


def theming_entries() -> list[StackEntry]:
    return linear_entries(
        "main",
        "setup-theming",
        "refactor-theme",
        "add-dark-mode",
        pr_numbers={"setup-theming": 245, "refactor-theme": 246, "add-dark-mode": 247},
        with_urls=True,
    )


def theming_snapshot(
    checks: dict[str, list[CheckResult]] | None = None,
    *,
    notices: tuple[str, ...] = (),
    checks_available: bool = True,
) -> StackSnapshot:
    """The setup-theming -> refactor-theme -> add-dark-mode stack on main."""
    if checks is None:
        checks = {"setup-theming": [check("build", CheckState.FAILED, 65)]}
    forest = build_forest(
        theming_entries(),
        checks,
        current_branch="add-dark-mode",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )
    return StackSnapshot(
        forest=forest,
        generated_at=DEFAULT_NOW,
        stack_available=True,
        checks_available=checks_available,
        notices=notices,
    )
