"""Git CLI orchestration and repository inspection."""

from .inspector import RepositoryInspector
from .models import BranchInfo, RepositorySnapshot
from .runner import (
    FakeGitRunner,
    GitExecutionResult,
    GitNotFoundError,
    GitRunner,
    GitRunnerError,
    GitTimeoutError,
)

__all__ = [
    "BranchInfo",
    "FakeGitRunner",
    "GitExecutionResult",
    "GitNotFoundError",
    "GitRunner",
    "GitRunnerError",
    "GitTimeoutError",
    "RepositoryInspector",
    "RepositorySnapshot",
]
