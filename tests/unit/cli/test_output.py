"""Tests for CLI output helpers."""

import pytest

from stack_status.cli.output import format_duration


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0s"),
        (45, "45s"),
        (60, "1m0s"),
        (125, "2m5s"),
        (3780, "1h3m"),
    ],
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert format_duration(seconds) == expected
