from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from git_pet.engine import apply_decay, feed, play, rename
from git_pet.storage import PetRecord

NOW = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)


def test_feed() -> None:
    pet = PetRecord.fresh(NOW)
    feed(pet, NOW)

    assert (pet.hunger, pet.happiness) == (75, 55)
    assert pet.last_fed == NOW


def test_feed_settles_decay_first() -> None:
    pet = PetRecord.fresh(NOW - timedelta(hours=10))
    feed(pet, NOW)

    assert (pet.hunger, pet.happiness) == (25, 15)


def test_feed_clamps_at_full() -> None:
    pet = PetRecord.fresh(NOW)
    pet.hunger = 90
    feed(pet, NOW)

    assert pet.hunger == 100


def test_play() -> None:
    pet = PetRecord.fresh(NOW)
    play(pet, NOW)

    assert (pet.hunger, pet.happiness) == (42, 70)
    assert pet.last_played == NOW


def test_play_with_empty_stomach() -> None:
    pet = PetRecord.fresh(NOW)
    pet.hunger = 3
    play(pet, NOW)

    assert pet.hunger == 0


def test_stats_stay_in_range() -> None:
    pet = PetRecord.fresh(NOW)
    operations = itertools.cycle([feed, feed, play, apply_decay, play, play, feed, apply_decay])
    for step in range(60):
        operation = next(operations)
        operation(pet, NOW + timedelta(hours=step * 0.75))
        assert 0 <= pet.hunger <= 100
        assert 0 <= pet.happiness <= 100


def test_rename() -> None:
    pet = PetRecord.fresh(NOW)

    assert rename(pet, "  Octocat  ") == "Git Pet"
    assert pet.name == "Octocat"


@pytest.mark.parametrize("name", ["", "   ", "x" * 51])
def test_rename_rejects_invalid_names(name: str) -> None:
    pet = PetRecord.fresh(NOW)

    with pytest.raises(ValueError, match="1-50 characters"):
        rename(pet, name)
    assert pet.name == "Git Pet"
