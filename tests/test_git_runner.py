from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from git_pet.git.runner import (
    FakeGitRunner,
    GitExecutionResult,
    GitNotFoundError,
    GitRunner,
    GitTimeoutError,
)
from git_pet.git.utils import sanitize_environment


def _script(tmp_path: Path, body: str) -> Path:
    script = tmp_path / "git"
    script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    script.chmod(0o755)
    return script


def test_git_runner_passes_arguments(tmp_path: Path) -> None:
    runner = GitRunner(_script(tmp_path, 'echo "$@"'))
    result = asyncio.run(runner.run("status", "--porcelain"))

    assert result.ok
    assert result.stdout.strip() == "status --porcelain"


def test_git_runner_reports_failure(tmp_path: Path) -> None:
    runner = GitRunner(_script(tmp_path, "echo 'fatal: not a git repository' >&2\nexit 128"))
    result = asyncio.run(runner.run("rev-parse", "--show-toplevel"))

    assert not result.ok
    assert result.returncode == 128
    assert "not a git repository" in result.stderr


def test_git_runner_runs_in_cwd(tmp_path: Path) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    runner = GitRunner(_script(tmp_path, "pwd"), cwd=workdir)

    result = asyncio.run(runner.run())

    assert Path(result.stdout.strip()).resolve() == workdir.resolve()


def test_git_runner_times_out(tmp_path: Path) -> None:
    runner = GitRunner(_script(tmp_path, "exec sleep 5"), timeout=0.2)

    with pytest.raises(GitTimeoutError):
        asyncio.run(runner.run("fetch"))


def test_git_not_found(tmp_path: Path) -> None:
    with pytest.raises(GitNotFoundError):
        GitRunner(tmp_path / "missing")


def test_fake_git_runner_records_invocations() -> None:
    fake = FakeGitRunner(
        {("branch", "--show-current"): GitExecutionResult(args=(), returncode=0, stdout="main\n", stderr="")}
    )

    branch = asyncio.run(fake.run("branch", "--show-current"))
    other = asyncio.run(fake.run("status", "--porcelain"))

    assert branch.stdout == "main\n"
    assert other.ok and other.stdout == ""
    assert fake.invocations == [("branch", "--show-current"), ("status", "--porcelain")]


def test_fake_git_runner_raises_seeded_errors() -> None:
    fake = FakeGitRunner({("fetch",): GitTimeoutError("slow")})

    with pytest.raises(GitTimeoutError):
        asyncio.run(fake.run("fetch"))


def test_sanitize_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_DIR", "/elsewhere/.git")
    monkeypatch.setenv("LC_ALL", "de_DE.UTF-8")

    env = sanitize_environment({"EXTRA": "1"})

    assert "GIT_DIR" not in env
    assert env["LC_ALL"] == "C"
    assert env["GIT_TERMINAL_PROMPT"] == "0"
    assert env["EXTRA"] == "1"
