"""Point-in-time view of a git repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class BranchInfo:
    name: str
    last_commit_time: datetime | None


@dataclass(slots=True)
class RepositorySnapshot:
    """Facts about the repository the pet reacts to. Read-only for the engine."""

    is_git_repo: bool
    has_uncommitted_changes: bool = False
    has_conflicts: bool = False
    current_branch: str | None = None
    last_commit_timestamp: datetime | None = None
    ahead_count: int = 0
    behind_count: int = 0
    branches: list[BranchInfo] = field(default_factory=list)
    repo_root_dir: str | None = None
    error: str | None = None

    @classmethod
    def not_a_repository(cls, error: str) -> "RepositorySnapshot":
        return cls(is_git_repo=False, error=error)


__all__ = ["BranchInfo", "RepositorySnapshot"]
