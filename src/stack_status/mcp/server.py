"""MCP server exposing stack status to AI assistants over stdio."""

from typing import Any

from mcp.server.fastmcp import FastMCP

from stack_status.core.context import StackStatusContext
from stack_status.core.snapshot import collect_snapshot
from stack_status.mcp.responder import StackStatusResponder

MCP_SERVER_INSTRUCTIONS = (
    "Get Graphite stack status and CI check progress. Use get_stack_status for the "
    "full stack view, get_pr_checks for one branch's checks and get_branch_info for "
    "a branch's identity and aggregate status."
)


def create_server(ctx: StackStatusContext) -> FastMCP:
    """Create the MCP server with all tools registered.

    Every tool call collects a fresh snapshot; nothing is cached between calls.
    """
    responder = StackStatusResponder(lambda: collect_snapshot(ctx))
    mcp = FastMCP("stack-status", instructions=MCP_SERVER_INSTRUCTIONS)

    @mcp.tool()
    def get_stack_status() -> dict[str, Any]:
        """Get the current Graphite stack status including CI check progress for all PRs."""
        return responder.get_stack_status()

    @mcp.tool()
    def get_pr_checks(branch: str) -> dict[str, Any]:
        """Get detailed CI check status for a specific branch.

        Args:
            branch: Branch name in the current stack
        """
        return responder.get_pr_checks(branch)

    @mcp.tool()
    def get_branch_info(branch: str | None = None) -> dict[str, Any]:
        """Get a branch's name, PR number and URL, role and aggregate CI status.

        Args:
            branch: Branch name; defaults to the current branch
        """
        return responder.get_branch_info(branch)

    return mcp


def run_server(ctx: StackStatusContext) -> None:
    """Run the MCP server on the stdio transport until the client disconnects."""
    create_server(ctx).run(transport="stdio")
