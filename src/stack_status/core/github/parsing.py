"""Parsing for gh CLI JSON output."""

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from stack_status.core.errors import ParseError
from stack_status.core.types import CheckResult, CheckState, PullRequestInfo

CHECK_JSON_FIELDS = "name,state,bucket,startedAt,completedAt,link"
PR_LIST_JSON_FIELDS = "number,headRefName,url,state"

_BUCKET_STATES = {
    "pass": CheckState.PASSED,
    "fail": CheckState.FAILED,
    "skipping": CheckState.SKIPPED,
    "cancel": CheckState.CANCELLED,
}


def _load_json_list(stdout: str, what: str) -> list[Any]:
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {what}: {e}") from e
    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array in {what}, got {type(data).__name__}")
    return data


def _check_state(bucket: str | None, state: str | None) -> CheckState:
    if bucket == "pending":
        return CheckState.RUNNING if state == "IN_PROGRESS" else CheckState.QUEUED
    if bucket is None:
        return CheckState.UNKNOWN
    return _BUCKET_STATES.get(bucket, CheckState.UNKNOWN)


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # gh reports "0001-01-01T00:00:00Z" for checks that never started
    if parsed.year <= 1:
        return None
    return parsed


def _duration_seconds(started_at: Any, completed_at: Any) -> int | None:
    start = _parse_timestamp(started_at)
    end = _parse_timestamp(completed_at)
    if start is None or end is None:
        return None
    return max(0, int((end - start).total_seconds()))


def _unique_name(name: str, emitted: set[str]) -> str:
    if name not in emitted:
        return name
    suffix = 2
    while f"{name} #{suffix}" in emitted:
        suffix += 1
    return f"{name} #{suffix}"


def parse_gh_pr_checks(stdout: str) -> list[CheckResult]:
    """Parse `gh pr checks --json name,state,bucket,startedAt,completedAt,link`.

    Unrecognized buckets map to UNKNOWN. Durations are only kept for
    completed (PASSED or FAILED) checks. A repeated check name gets
    the lowest " #N" suffix (N >= 2) not already taken, so names stay unique
    within one branch.

    Raises:
        ParseError: If stdout is not a JSON array of objects with a string name
    """
    items = _load_json_list(stdout, "gh pr checks output")

    results: list[CheckResult] = []
    emitted: set[str] = set()
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise ParseError(f"Malformed check entry in gh pr checks output: {item!r}")

        state = _check_state(item.get("bucket"), item.get("state"))
        duration = (
            _duration_seconds(item.get("startedAt"), item.get("completedAt"))
            if state.is_complete
            else None
        )

        name = _unique_name(item["name"], emitted)
        emitted.add(name)

        link = item.get("link")
        results.append(
            CheckResult(
                name=name,
                state=state,
                duration_seconds=duration,
                url=link if isinstance(link, str) and link else None,
            )
        )

    return results


def parse_gh_pr_list(stdout: str) -> dict[str, PullRequestInfo]:
    """Parse `gh pr list --json number,headRefName,url,state` into branch -> PR.

    gh lists the most recent PRs first. When several PRs share a head branch
    an open one wins; otherwise the most recent one is kept, so branches
    whose PR was merged or closed still get a PR number and URL.

    Raises:
        ParseError: If stdout is not a JSON array of PR objects
    """
    items = _load_json_list(stdout, "gh pr list output")

    pull_requests: dict[str, PullRequestInfo] = {}
    for item in items:
        if not isinstance(item, dict):
            raise ParseError(f"Malformed PR entry in gh pr list output: {item!r}")
        branch = item.get("headRefName")
        number = item.get("number")
        if not isinstance(branch, str) or not isinstance(number, int):
            raise ParseError(f"Malformed PR entry in gh pr list output: {item!r}")

        url = item.get("url")
        state = item.get("state")
        info = PullRequestInfo(
            number=number,
            url=url if isinstance(url, str) and url else None,
            state=state if isinstance(state, str) else "OPEN",
        )
        existing = pull_requests.get(branch)
        if existing is None or (existing.state != "OPEN" and info.state == "OPEN"):
            pull_requests[branch] = info

    return pull_requests


def aggregate_check_lists(raw: Mapping[str, str]) -> dict[str, list[CheckResult]]:
    """Parse the raw check listing of every branch.

    Args:
        raw: Mapping of branch name -> raw `gh pr checks` JSON

    Returns:
        Mapping of branch name -> ordered checks
    """
    return {branch: parse_gh_pr_checks(stdout) for branch, stdout in raw.items()}
