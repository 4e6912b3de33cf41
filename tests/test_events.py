from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from git_pet.engine import apply_event, process_event
from git_pet.storage import PetRecord, StateStore

NOW = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)


def test_commit_with_changes_on_fresh_pet() -> None:
    pet = PetRecord.fresh(NOW)

    outcome = apply_event(pet, "post-commit", ["--changes"], now=NOW)

    assert outcome.recognized
    assert pet.experience == 35
    assert pet.achievements == {"FIRST_COMMIT": NOW}
    assert outcome.exp_awarded == 35
    assert outcome.achievements_unlocked == ["FIRST_COMMIT"]

    later = NOW + timedelta(hours=1)
    again = apply_event(pet, "post-commit", ["--changes"], now=later)

    assert pet.experience == 45
    assert pet.achievements == {"FIRST_COMMIT": NOW}
    assert again.exp_awarded == 10
    assert again.achievements_unlocked == []


def test_commit_without_changes_is_skipped() -> None:
    pet = PetRecord.fresh(NOW)

    outcome = apply_event(pet, "post-commit", [], now=NOW)

    assert outcome.recognized
    assert outcome.exp_awarded == 0
    assert pet.achievements == {}


@pytest.mark.parametrize(
    ("event", "args", "experience", "achievement"),
    [
        ("post-merge", [], 50, "FIRST_MERGE"),
        ("post-merge", ["--was-conflict"], 90, "FIRST_CONFLICT_RESOLVED"),
        ("pre-push", [], 5, None),
        ("branch-deleted", ["--was-old"], 8, None),
        ("branch-deleted", ["--was-merged"], 8, None),
        ("branch-deleted", [], 0, None),
    ],
)
def test_event_rewards(event: str, args: list[str], experience: int, achievement: str | None) -> None:
    pet = PetRecord.fresh(NOW)

    apply_event(pet, event, args, now=NOW)

    assert pet.experience == experience
    assert list(pet.achievements) == ([achievement] if achievement else [])


def test_event_that_levels_up() -> None:
    pet = PetRecord.fresh(NOW)
    pet.experience = 95

    outcome = apply_event(pet, "post-commit", ["--changes"], now=NOW)

    assert (pet.level, pet.experience) == (2, 30)
    assert outcome.levels_gained == 1
    assert outcome.exp_awarded == 35


def test_unknown_event_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    pet = PetRecord.fresh(NOW)

    with caplog.at_level(logging.WARNING):
        outcome = apply_event(pet, "post-rebase", ["--whatever"], now=NOW)

    assert not outcome.recognized
    assert pet.experience == 0
    assert "Unknown event type received: post-rebase" in caplog.text


def test_process_event_persists(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json", clock=lambda: NOW)

    outcome = process_event("post-commit", ["--changes"], store=store, now=NOW)
    assert outcome.saved

    pet = store.load().global_pet
    assert pet.experience == 35
    assert pet.achievements == {"FIRST_COMMIT": NOW}

    process_event("post-commit", ["--changes"], store=store, now=NOW + timedelta(hours=1))
    pet = store.load().global_pet
    assert pet.experience == 45
    assert pet.achievements == {"FIRST_COMMIT": NOW}


def test_process_event_normalizes_stored_progress(tmp_path: Path) -> None:
    store = StateStore(tmp_path / "state.json", clock=lambda: NOW)
    state = store.load()
    state.global_pet.experience = 260
    store.save(state)

    process_event("pre-push", store=store, now=NOW)

    pet = store.load().global_pet
    assert (pet.level, pet.experience) == (3, 15)
