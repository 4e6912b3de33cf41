"""Translate git command output into a ``RepositorySnapshot``."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from .models import BranchInfo, RepositorySnapshot
from .runner import GitExecutionResult, GitRunner, GitRunnerError

logger = logging.getLogger(__name__)

NOT_A_REPOSITORY = "Not currently in a Git repository."
DETACHED_HEAD = "detached HEAD"

# Two-letter porcelain codes for unmerged paths.
_CONFLICT_CODES = {"UU", "AA", "DD", "AU", "UA", "DU", "UD"}

_STATUS_ARGS = ("status", "--porcelain")
_LOG_ARGS = ("log", "-1", "--format=%ct")
_BRANCH_ARGS = ("branch", "--show-current")
_REFS_ARGS = (
    "for-each-ref",
    "--format=%(refname:short) %(committerdate:unix)",
    "refs/heads",
)
_ROOT_ARGS = ("rev-parse", "--show-toplevel")
_AHEAD_BEHIND_ARGS = ("rev-list", "--left-right", "--count", "@{upstream}...HEAD")


def _parse_unix_timestamp(raw: str) -> datetime | None:
    value = raw.strip()
    if not value.isdigit():
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def parse_porcelain(output: str) -> tuple[bool, bool]:
    """Return ``(has_uncommitted_changes, has_conflicts)`` for ``git status --porcelain``."""

    lines = [line for line in output.splitlines() if line.strip()]
    has_conflicts = any(line[:2] in _CONFLICT_CODES for line in lines)
    return bool(lines), has_conflicts


def parse_branches(output: str) -> list[BranchInfo]:
    branches: list[BranchInfo] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        name, _, stamp = line.rpartition(" ")
        if not name:
            # Branch without a parseable date column.
            branches.append(BranchInfo(name=stamp, last_commit_time=None))
            continue
        branches.append(BranchInfo(name=name, last_commit_time=_parse_unix_timestamp(stamp)))
    return branches


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """Return ``(ahead, behind)`` from ``rev-list --left-right --count @{u}...HEAD``."""

    parts = output.split()
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return 0, 0
    behind, ahead = (int(part) for part in parts)
    return ahead, behind


class RepositoryInspector:
    """Collect a repository snapshot by running git commands."""

    def __init__(self, runner: GitRunner, *, check_remote_status: bool = False) -> None:
        self._runner = runner
        self._check_remote_status = check_remote_status

    async def _run(self, *args: str) -> GitExecutionResult:
        try:
            return await self._runner.run(*args)
        except GitRunnerError as exc:
            logger.warning("git command failed to run", extra={"git_args": args, "error": str(exc)})
            return GitExecutionResult(args=args, returncode=-1, stdout="", stderr=str(exc))

    async def snapshot(self) -> RepositorySnapshot:
        root = await self._run(*_ROOT_ARGS)
        if not root.ok:
            if "not a git repository" in root.stderr.lower():
                return RepositorySnapshot.not_a_repository(NOT_A_REPOSITORY)
            return RepositorySnapshot.not_a_repository(
                root.stderr.strip() or "Failed to determine git repository root."
            )

        commands = [_STATUS_ARGS, _LOG_ARGS, _BRANCH_ARGS, _REFS_ARGS]
        if self._check_remote_status:
            commands.append(_AHEAD_BEHIND_ARGS)
        results = await asyncio.gather(*(self._run(*args) for args in commands))
        status, log, branch, refs = results[:4]

        errors: list[str] = []
        for args, result in zip(commands[:4], results[:4]):
            if not result.ok and args is not _LOG_ARGS:
                errors.append(f"git {args[0]}: {result.stderr.strip()}")

        has_changes, has_conflicts = parse_porcelain(status.stdout) if status.ok else (False, False)

        # A fresh repository has no commits; `git log` fails and that is not an error.
        last_commit = _parse_unix_timestamp(log.stdout) if log.ok else None

        current_branch = branch.stdout.strip() if branch.ok else ""
        ahead, behind = 0, 0
        if self._check_remote_status:
            upstream = results[4]
            if upstream.ok:
                ahead, behind = parse_ahead_behind(upstream.stdout)
            else:
                logger.debug("no upstream configured", extra={"stderr": upstream.stderr.strip()})

        if errors:
            logger.warning(
                "One or more git commands failed while checking repository state",
                extra={"errors": errors},
            )

        return RepositorySnapshot(
            is_git_repo=True,
            has_uncommitted_changes=has_changes,
            has_conflicts=has_conflicts,
            current_branch=current_branch or DETACHED_HEAD,
            last_commit_timestamp=last_commit,
            ahead_count=ahead,
            behind_count=behind,
            branches=parse_branches(refs.stdout) if refs.ok else [],
            repo_root_dir=root.stdout.strip() or None,
            error="; ".join(errors) or None,
        )


__all__ = [
    "DETACHED_HEAD",
    "NOT_A_REPOSITORY",
    "RepositoryInspector",
    "parse_ahead_behind",
    "parse_branches",
    "parse_porcelain",
]
