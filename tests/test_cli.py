from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from git_pet import cli
from git_pet.config import get_settings
from git_pet.git import RepositorySnapshot


@pytest.fixture
def state_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "state.json"
    monkeypatch.setenv("GIT_PET_STATE_PATH", str(path))
    monkeypatch.delenv("GIT_PET_CATALOG_PATHS", raising=False)
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


def _use_snapshot(monkeypatch: pytest.MonkeyPatch, snapshot: RepositorySnapshot) -> list[bool]:
    calls: list[bool] = []

    async def fake_collect_snapshot(_settings, *, check_remote_status):
        calls.append(check_remote_status)
        return snapshot

    monkeypatch.setattr(cli, "collect_snapshot", fake_collect_snapshot)
    return calls


def _stored_pet(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))["globalPet"]


def test_status_in_repository(state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    calls = _use_snapshot(monkeypatch, RepositorySnapshot(is_git_repo=True, repo_root_dir="/work/repo"))

    assert cli.main(["status"]) == 0

    out = capsys.readouterr().out
    assert "Mood: neutral" in out
    assert "Hunger: 50/100" in out
    assert "Level 1 (0/100 EXP)" in out
    assert calls == [False]
    stored = _stored_pet(state_path)
    assert stored["animationFrame"] == 1
    assert stored["repoRootDir"] == "/work/repo"


def test_status_is_the_default_command(state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _use_snapshot(monkeypatch, RepositorySnapshot(is_git_repo=True, has_conflicts=True))

    assert cli.main([]) == 0

    out = capsys.readouterr().out
    assert "Mood: stressed" in out
    assert "( >_< )" in out


def test_status_outside_repository(state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _use_snapshot(monkeypatch, RepositorySnapshot.not_a_repository("Not currently in a Git repository."))

    cli.main(["status"])

    out = capsys.readouterr().out
    assert "You're not in a Git repository. Git Pet is a bit confused!" in out
    assert "Mood: confused" in out


def test_summary(state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _use_snapshot(
        monkeypatch,
        RepositorySnapshot(is_git_repo=True, repo_root_dir="/work/repo", current_branch="main"),
    )

    assert cli.main(["summary"]) == 0

    out = capsys.readouterr().out
    assert "Current Mood: neutral (Reason: default)" in out
    assert "Current Branch: main" in out
    assert "Remote Status Check: Disabled" in out
    assert out.rstrip().endswith("--- End Summary ---")


def test_feed_and_play(state_path: Path, capsys) -> None:
    assert cli.main(["feed"]) == 0
    assert "Git Pet enjoys the virtual snack!" in capsys.readouterr().out
    assert _stored_pet(state_path)["hunger"] == 75

    assert cli.main(["play"]) == 0
    assert "looks happy after playing" in capsys.readouterr().out
    stored = _stored_pet(state_path)
    assert (stored["hunger"], stored["happiness"]) == (67, 75)


def test_name(state_path: Path, capsys) -> None:
    assert cli.main(["name", "Octocat"]) == 0

    assert "You renamed 'Git Pet' to 'Octocat'!" in capsys.readouterr().out
    assert _stored_pet(state_path)["name"] == "Octocat"


def test_name_rejects_long_names(state_path: Path, capsys) -> None:
    assert cli.main(["name", "x" * 51]) == 2

    assert "1-50 characters" in capsys.readouterr().out


def test_config_set_get_list(state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    assert cli.main(["config", "set", "checkRemoteStatus", "TRUE"]) == 0
    assert "checkRemoteStatus set to true" in capsys.readouterr().out
    assert json.loads(state_path.read_text(encoding="utf-8"))["config"] == {"checkRemoteStatus": True}

    cli.main(["config", "get", "checkRemoteStatus"])
    assert capsys.readouterr().out.strip() == "checkRemoteStatus: true"

    cli.main(["config", "list"])
    assert "checkRemoteStatus: true" in capsys.readouterr().out

    calls = _use_snapshot(monkeypatch, RepositorySnapshot(is_git_repo=True))
    cli.main(["status"])
    assert calls == [True]


def test_config_rejects_bad_values(state_path: Path, capsys) -> None:
    assert cli.main(["config", "set", "checkRemoteStatus", "maybe"]) == 2
    assert cli.main(["config", "set", "checkRemoteStatus"]) == 2
    assert "Expected true or false" in capsys.readouterr().out


def test_react_and_achievements(state_path: Path, capsys) -> None:
    assert cli.main(["react", "post-commit", "--changes"]) == 0

    out = capsys.readouterr().out
    assert "+35 EXP" in out
    assert "Achievement Unlocked: First Commit!" in out
    assert _stored_pet(state_path)["experience"] == 35

    assert cli.main(["achievements"]) == 0
    out = capsys.readouterr().out
    assert "- First Commit! [+25 EXP Bonus]" in out
    assert "(Unlocked: " in out


def test_react_quietly_and_unknown_events(state_path: Path, capsys) -> None:
    assert cli.main(["react", "--quiet", "post-merge"]) == 0
    assert cli.main(["react", "post-rebase"]) == 0

    assert capsys.readouterr().out == ""
    assert _stored_pet(state_path)["experience"] == 50


def test_achievements_when_none_unlocked(state_path: Path, capsys) -> None:
    cli.main(["trophies"])

    assert "(No achievements unlocked yet! Keep using Git!)" in capsys.readouterr().out


def test_broken_catalogue_is_reported(
    state_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    catalog_dir = tmp_path / "achievements"
    catalog_dir.mkdir()
    (catalog_dir / "bad.yml").write_text("key: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("GIT_PET_CATALOG_PATHS", str(catalog_dir))
    get_settings.cache_clear()

    assert cli.main(["achievements"]) == 1

    assert "Achievement catalogue unavailable" in capsys.readouterr().out


def test_hooks_instructions_run_as_module(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = f"{repo_root / 'src'}" + os.pathsep + env.get("PYTHONPATH", "")
    env["GIT_PET_STATE_PATH"] = str(tmp_path / "state.json")
    process = subprocess.run(
        [sys.executable, "-m", "git_pet.cli", "hooks", "install-instructions"],
        cwd=str(tmp_path),
        capture_output=True,
        text=True,
        env=env,
    )

    assert process.returncode == 0
    assert ".git/hooks/post-commit:" in process.stdout
    assert "git-pet react post-commit --changes" in process.stdout


def test_invalid_environment_is_reported(
    state_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.setenv("GIT_PET_GIT_TIMEOUT", "0")
    get_settings.cache_clear()

    assert cli.main(["react", "pre-push"]) == 1

    out = capsys.readouterr().out
    assert out.startswith("Invalid git-pet configuration:")
    assert "GIT_PET_GIT_TIMEOUT must be > 0" in out
    assert len(out.strip().splitlines()) == 1
    assert not state_path.exists()
