"""Tests for the stack-status command using fakes."""

import json

from click.testing import CliRunner
from pytest import MonkeyPatch

from stack_status.cli.cli import cli
from stack_status.core.config import StackStatusConfig
from stack_status.core.context import StackStatusContext
from tests.conftest import load_fixture
from tests.fakes.context import create_test_context
from tests.fakes.git import FakeGit
from tests.fakes.github import FakeGitHub
from tests.fakes.graphite import FakeGraphite
from tests.fakes.time import FakeTime
from tests.test_utils.snapshot_builders import open_prs

THEMING_PRS = open_prs({"add-dark-mode": 247, "refactor-theme": 246, "setup-theming": 245})


def _theming_context(time: FakeTime | None = None, config: StackStatusConfig | None = None):
    return create_test_context(
        graphite=FakeGraphite(listing=load_fixture("graphite/log_short_linear.txt")),
        github=FakeGitHub(
            pull_requests=THEMING_PRS,
            check_listings={"setup-theming": load_fixture("github/pr_checks_build_failed.json")},
        ),
        time=time,
        config=config,
    )


def test_renders_stack_tree() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=_theming_context())

    assert result.exit_code == 0, result.output
    assert "Stack Status" in result.output
    assert "◉ add-dark-mode (#247)" in result.output
    assert "1 failed" in result.output


def test_details_flag_lists_checks() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--details"], obj=_theming_context())

    assert result.exit_code == 0, result.output
    assert "✗ build (1m5s)" in result.output


def test_show_details_from_config() -> None:
    config = StackStatusConfig(
        trunk_names=("main",), refresh_interval=10, command_timeout=30.0, show_details=True
    )
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=_theming_context(config=config))

    assert result.exit_code == 0, result.output
    assert "✗ build (1m5s)" in result.output


def test_json_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json"], obj=_theming_context())

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["current_branch"] == "add-dark-mode"
    assert data["checks_available"] is True
    assert [b["name"] for b in data["branches"]][0] == "main"
    assert data["summary"]["aggregate"]["status"] == "failed"


def test_branch_override() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "--branch", "refactor-theme"], obj=_theming_context())

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["current_branch"] == "refactor-theme"


def test_unknown_branch_exits_with_error() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--branch", "nope"], obj=_theming_context())

    assert result.exit_code == 1
    assert "Error: Branch 'nope' not found in stack" in result.output


def test_unknown_branch_json_error() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "-b", "nope"], obj=_theming_context())

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data == {
        "error": "Branch 'nope' not found in stack",
        "error_type": "NotFound",
        "exit_code": 1,
    }


def test_malformed_gt_output_exits_with_error() -> None:
    ctx = create_test_context(graphite=FakeGraphite(listing="fatal: not a repo\n"))
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=ctx)

    assert result.exit_code == 1
    assert "Unexpected line 1" in result.output


def test_gh_unavailable_still_renders_stack() -> None:
    ctx = create_test_context(
        graphite=FakeGraphite(listing=load_fixture("graphite/log_short_linear.txt")),
        github=FakeGitHub(unavailable=True),
    )
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "GitHub CLI (gh) unavailable" in result.output
    assert "add-dark-mode" in result.output


def test_gt_unavailable_shows_current_branch_only() -> None:
    ctx = create_test_context(
        graphite=FakeGraphite(unavailable=True),
        git=FakeGit(current_branch="feature"),
    )
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Graphite CLI (gt) unavailable" in result.output
    assert "◉ feature" in result.output


def test_nothing_to_show_exits_with_error() -> None:
    ctx = create_test_context(graphite=FakeGraphite(unavailable=True), git=FakeGit())
    runner = CliRunner()
    result = runner.invoke(cli, [], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Nothing to show" in result.output


def test_watch_exits_cleanly_on_interrupt() -> None:
    time = FakeTime(interrupt_after=1)
    runner = CliRunner()
    result = runner.invoke(cli, ["--watch", "--interval", "3"], obj=_theming_context(time=time))

    assert result.exit_code == 0, result.output
    assert time.sleep_calls == [3]
    assert result.output.count("Updated: 14:02:11") == 2
    assert "Refreshing every 3s" in result.output


def test_watch_uses_configured_interval() -> None:
    time = FakeTime(interrupt_after=1)
    config = StackStatusConfig(
        trunk_names=("main",), refresh_interval=42, command_timeout=30.0, show_details=False
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["-w"], obj=_theming_context(time=time, config=config))

    assert result.exit_code == 0, result.output
    assert time.sleep_calls == [42]


def test_watch_exit_on_complete() -> None:
    time = FakeTime()
    runner = CliRunner()
    result = runner.invoke(cli, ["--watch", "--exit-on-complete"], obj=_theming_context(time=time))

    assert result.exit_code == 0, result.output
    assert time.sleep_calls == []
    assert "All checks complete" in result.output


def test_interval_must_be_positive() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--watch", "--interval", "0"], obj=_theming_context())

    assert result.exit_code == 2


def test_mcp_flag_starts_server(monkeypatch: MonkeyPatch) -> None:
    served: list[StackStatusContext] = []
    monkeypatch.setattr("stack_status.mcp.server.run_server", served.append)
    ctx = _theming_context()

    runner = CliRunner()
    result = runner.invoke(cli, ["--mcp"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert served == [ctx]
