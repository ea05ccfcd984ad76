"""Tests for forest assembly from stack entries and checks."""

import pytest

from stack_status.core.errors import ParseError
from stack_status.core.model_builder import DEFAULT_TRUNK_NAMES, build_forest
from stack_status.core.types import BranchRole, CheckState, StackEntry
from tests.test_utils.snapshot_builders import check, linear_entries, theming_entries


def test_theming_stack_scenario() -> None:
    """Failed build on setup-theming, no checks elsewhere, current at the tip."""
    forest = build_forest(
        theming_entries(),
        {"setup-theming": [check("build", CheckState.FAILED, 65)]},
        current_branch="add-dark-mode",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )

    assert forest.branch_names == ("main", "setup-theming", "refactor-theme", "add-dark-mode")
    assert forest.roots == (0,)

    main = forest.nodes[0]
    assert main.role == BranchRole.TRUNK
    assert [c.name for c in forest.children_of(main)] == ["setup-theming"]

    setup = forest.get("setup-theming")
    assert setup is not None
    assert setup.role == BranchRole.STACK_MEMBER
    assert setup.pr_number == 245
    assert setup.aggregate.status == CheckState.FAILED
    assert (setup.aggregate.passed_count, setup.aggregate.total_count) == (0, 1)

    refactor = forest.get("refactor-theme")
    assert refactor is not None
    assert refactor.aggregate.status == CheckState.UNKNOWN
    assert (refactor.aggregate.passed_count, refactor.aggregate.total_count) == (0, 0)

    tip = forest.get("add-dark-mode")
    assert tip is not None
    assert tip.role == BranchRole.CURRENT
    assert tip.aggregate.status == CheckState.UNKNOWN
    assert forest.current == tip.index
    assert forest.parent_of(tip) == refactor


def test_parent_chain_length_matches_position() -> None:
    entries = theming_entries()
    forest = build_forest(entries, {}, current_branch=None, trunk_names=DEFAULT_TRUNK_NAMES)

    assert set(forest.branch_names) == {entry.name for entry in entries}
    for position, node in enumerate(forest.nodes):
        assert forest.depth(node) == position
        assert len(forest.chain(node.index)) == position + 1


def test_parent_and_children_are_consistent() -> None:
    entries = [
        StackEntry("main", None, None),
        StackEntry("feature-a", None, "main"),
        StackEntry("feature-c", None, "feature-a"),
        StackEntry("feature-b", None, "feature-a"),
        StackEntry("hotfix", None, "main"),
    ]
    forest = build_forest(entries, {}, current_branch="feature-c", trunk_names=DEFAULT_TRUNK_NAMES)

    for node in forest.nodes:
        for child in forest.children_of(node):
            assert child.parent == node.index
        parent = forest.parent_of(node)
        if parent is not None:
            assert node.index in parent.children

    feature_a = forest.get("feature-a")
    assert feature_a is not None
    assert [c.name for c in forest.children_of(feature_a)] == ["feature-c", "feature-b"]


def test_building_twice_yields_equal_forests() -> None:
    checks = {"setup-theming": [check("build", CheckState.PASSED, 10)]}
    first = build_forest(
        theming_entries(), checks, current_branch="add-dark-mode", trunk_names=DEFAULT_TRUNK_NAMES
    )
    second = build_forest(
        theming_entries(), checks, current_branch="add-dark-mode", trunk_names=DEFAULT_TRUNK_NAMES
    )

    assert first == second


def test_parent_listed_after_child_is_parse_error() -> None:
    entries = [StackEntry("feature", None, "main"), StackEntry("main", None, None)]

    with pytest.raises(ParseError, match="Inconsistent stack ordering"):
        build_forest(entries, {}, current_branch=None, trunk_names=DEFAULT_TRUNK_NAMES)


def test_duplicate_branch_is_parse_error() -> None:
    entries = [StackEntry("main", None, None), StackEntry("main", None, None)]

    with pytest.raises(ParseError, match="more than once"):
        build_forest(entries, {}, current_branch=None, trunk_names=DEFAULT_TRUNK_NAMES)


def test_unrecognized_root_is_still_trunk() -> None:
    forest = build_forest(
        linear_entries("release-2024", "fix"),
        {},
        current_branch="fix",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )

    assert forest.nodes[0].role == BranchRole.TRUNK
    assert forest.nodes[1].role == BranchRole.CURRENT


def test_trunk_names_are_injected() -> None:
    entries = [StackEntry("main", None, None), StackEntry("prod", None, None)]
    forest = build_forest(entries, {}, current_branch=None, trunk_names={"prod"})

    assert forest.get("prod").role == BranchRole.TRUNK  # type: ignore[union-attr]
    assert forest.get("main").role == BranchRole.STACK_MEMBER  # type: ignore[union-attr]


def test_multiple_independent_chains_form_a_forest() -> None:
    entries = [
        StackEntry("main", None, None),
        StackEntry("master", None, None),
        StackEntry("a", None, "main"),
        StackEntry("b", None, "master"),
    ]
    forest = build_forest(entries, {}, current_branch="b", trunk_names=DEFAULT_TRUNK_NAMES)

    assert forest.roots == (0, 1)
    assert [forest.nodes[i].role for i in forest.roots] == [BranchRole.TRUNK, BranchRole.TRUNK]
    assert forest.lineage(forest.current) == (1, 3)  # type: ignore[arg-type]


def test_current_wins_over_trunk_when_trunk_is_checked_out() -> None:
    forest = build_forest(
        linear_entries("main", "feature"),
        {},
        current_branch="main",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )

    assert forest.nodes[0].role == BranchRole.CURRENT
    assert forest.current == 0


def test_unknown_current_branch_leaves_no_current_node() -> None:
    forest = build_forest(
        linear_entries("main", "feature"),
        {},
        current_branch="elsewhere",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )

    assert forest.current is None
    assert forest.current_node is None


def test_checks_for_unlisted_branches_are_ignored() -> None:
    forest = build_forest(
        linear_entries("main", "feature"),
        {"gone": [check("build", CheckState.PASSED)]},
        current_branch="feature",
        trunk_names=DEFAULT_TRUNK_NAMES,
    )

    assert all(node.checks == () for node in forest.nodes)


def test_lineage_follows_first_child_to_tip() -> None:
    forest = build_forest(
        theming_entries(), {}, current_branch="setup-theming", trunk_names=DEFAULT_TRUNK_NAMES
    )
    setup = forest.get("setup-theming")
    assert setup is not None

    assert [forest.nodes[i].name for i in forest.lineage(setup.index)] == [
        "main",
        "setup-theming",
        "refactor-theme",
        "add-dark-mode",
    ]


def test_empty_entries_build_empty_forest() -> None:
    forest = build_forest([], {}, current_branch=None, trunk_names=DEFAULT_TRUNK_NAMES)

    assert forest.nodes == ()
    assert forest.roots == ()
    assert forest.current is None
