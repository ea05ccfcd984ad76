from stack_status.core.git.abc import Git
from stack_status.core.git.real import RealGit

__all__ = ["Git", "RealGit"]
