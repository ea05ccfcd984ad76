"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from stack_status.core.config import ConfigStore, FilesystemConfigStore, StackStatusConfig
from stack_status.core.git.abc import Git
from stack_status.core.git.real import RealGit
from stack_status.core.github.abc import GitHub
from stack_status.core.github.real import RealGitHub
from stack_status.core.graphite.abc import Graphite
from stack_status.core.graphite.real import RealGraphite
from stack_status.core.time.abc import Time
from stack_status.core.time.real import RealTime


@dataclass(frozen=True)
class StackStatusContext:
    """Immutable context holding all dependencies for stack-status operations.

    Created at the CLI entry point and threaded through the application.
    Tests construct it directly with fake integrations.
    """

    graphite: Graphite
    github: GitHub
    git: Git
    time: Time
    config: StackStatusConfig
    cwd: Path


def create_context(*, config_store: ConfigStore | None = None) -> StackStatusContext:
    """Create the production context.

    Raises:
        ValueError: If the configuration file is malformed
    """
    store = config_store if config_store is not None else FilesystemConfigStore()
    config = store.load()
    timeout = config.command_timeout
    return StackStatusContext(
        graphite=RealGraphite(timeout=timeout),
        github=RealGitHub(timeout=timeout),
        git=RealGit(timeout=timeout),
        time=RealTime(),
        config=config,
        cwd=Path.cwd(),
    )
