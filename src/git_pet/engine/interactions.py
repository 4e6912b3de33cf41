"""Things the user does to the pet directly."""

from __future__ import annotations

from datetime import datetime

from ..storage.models import MAX_NAME_LENGTH, PetRecord
from ..timeutils import clamp_stat
from .constants import FEED_HAPPINESS_GAIN, FEED_HUNGER_GAIN, PLAY_HAPPINESS_GAIN, PLAY_HUNGER_LOSS
from .decay import apply_decay


def feed(pet: PetRecord, now: datetime) -> None:
    # Settle pending decay first; feeding moves the decay reference to now.
    apply_decay(pet, now)
    pet.hunger = clamp_stat(pet.hunger + FEED_HUNGER_GAIN)
    pet.happiness = clamp_stat(pet.happiness + FEED_HAPPINESS_GAIN)
    pet.last_fed = now


def play(pet: PetRecord, now: datetime) -> None:
    apply_decay(pet, now)
    pet.happiness = clamp_stat(pet.happiness + PLAY_HAPPINESS_GAIN)
    pet.hunger = clamp_stat(pet.hunger - PLAY_HUNGER_LOSS)
    pet.last_played = now


def rename(pet: PetRecord, name: str) -> str:
    """Rename the pet and return the old name. Raises ValueError for an invalid name."""

    new_name = (name or "").strip()
    if not new_name or len(new_name) > MAX_NAME_LENGTH:
        raise ValueError(f"Please provide a valid name (1-{MAX_NAME_LENGTH} characters).")
    old_name = pet.name
    pet.name = new_name
    return old_name


__all__ = ["feed", "play", "rename"]
