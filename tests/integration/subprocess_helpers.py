"""Helpers for driving real integrations against a mocked subprocess.run."""

import subprocess
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from pytest import MonkeyPatch

RunFunction = Callable[..., subprocess.CompletedProcess]


@contextmanager
def mock_subprocess_run(monkeypatch: MonkeyPatch, mock_run: RunFunction) -> Iterator[None]:
    """Replace subprocess.run as seen by the subprocess wrapper."""
    with monkeypatch.context() as m:
        m.setattr("stack_status.core.subprocess.subprocess.run", mock_run)
        yield


def completed(cmd: list[str], stdout: str = "", stderr: str = "", returncode: int = 0):
    return subprocess.CompletedProcess(
        args=cmd, returncode=returncode, stdout=stdout, stderr=stderr
    )
