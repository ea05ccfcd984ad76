"""Request handlers for the assistant-integration (MCP) surface.

Each handler builds a fresh snapshot through the injected provider and
returns a JSON-compatible dict. Errors never escape: NotFound, ParseError and
FetcherUnavailable become {"error": ..., "error_type": ...} payloads.
"""

import logging
from collections.abc import Callable
from typing import Any

from stack_status.cli.json_schemas import (
    aggregate_to_pydantic,
    check_to_pydantic,
    snapshot_to_pydantic,
)
from stack_status.core.errors import NotFound, StackStatusError
from stack_status.core.forest import BranchNode, StackSnapshot

logger = logging.getLogger(__name__)


def error_payload(error: Exception) -> dict[str, Any]:
    return {"error": str(error), "error_type": type(error).__name__}


def branch_info_payload(node: BranchNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "pr_number": node.pr_number,
        "pr_url": node.pr_url,
        "role": node.role.value,
        "aggregate_status": node.aggregate.status.value,
    }


class StackStatusResponder:
    """Serves get_stack_status, get_pr_checks and get_branch_info."""

    def __init__(self, snapshot_provider: Callable[[], StackSnapshot]) -> None:
        self._snapshot_provider = snapshot_provider

    def _snapshot(self) -> StackSnapshot:
        return self._snapshot_provider()

    def get_stack_status(self) -> dict[str, Any]:
        try:
            snapshot = self._snapshot()
        except StackStatusError as e:
            logger.debug("get_stack_status failed: %s", e)
            return error_payload(e)
        return snapshot_to_pydantic(snapshot).model_dump(mode="json")

    def get_pr_checks(self, branch: str) -> dict[str, Any]:
        try:
            snapshot = self._snapshot()
            node = snapshot.forest.get(branch)
            if node is None:
                raise NotFound(branch)
        except StackStatusError as e:
            logger.debug("get_pr_checks(%s) failed: %s", branch, e)
            return error_payload(e)

        return {
            "branch": node.name,
            "pr_number": node.pr_number,
            "pr_url": node.pr_url,
            "checks_available": snapshot.checks_available,
            "aggregate": aggregate_to_pydantic(node.aggregate).model_dump(mode="json"),
            "checks": [check_to_pydantic(check).model_dump(mode="json") for check in node.checks],
        }

    def get_branch_info(self, branch: str | None = None) -> dict[str, Any]:
        try:
            snapshot = self._snapshot()
        except StackStatusError as e:
            logger.debug("get_branch_info(%s) failed: %s", branch, e)
            return error_payload(e)

        forest = snapshot.forest
        if branch is None:
            node = forest.current_node
            if node is None:
                return {"error": "No current branch in stack", "error_type": "NotFound"}
        else:
            node = forest.get(branch)
            if node is None:
                return error_payload(NotFound(branch))
        return branch_info_payload(node)
