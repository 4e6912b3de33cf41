"""Experience, levels and achievements."""

from __future__ import annotations

import logging
from datetime import datetime

from ..catalog import AchievementCatalog
from ..storage.models import PetRecord
from ..timeutils import clamp_stat, utcnow
from .constants import (
    LEVEL_ACHIEVEMENTS,
    LEVEL_BASE_EXP,
    LEVEL_EXP_INCREMENT,
    LEVEL_UP_HAPPINESS_BOOST,
    LEVEL_UP_HUNGER_BOOST,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = AchievementCatalog()


def exp_required_for_next_level(level: int) -> int:
    return LEVEL_BASE_EXP + LEVEL_EXP_INCREMENT * (max(level, 1) - 1)


def total_experience(pet: PetRecord) -> int:
    """Experience earned over the pet's whole life, independent of level boundaries."""

    return sum(exp_required_for_next_level(level) for level in range(1, pet.level)) + pet.experience


def _roll_over_levels(pet: PetRecord) -> int:
    gained = 0
    required = exp_required_for_next_level(pet.level)
    while pet.experience >= required:
        pet.experience -= required
        pet.level += 1
        gained += 1
        required = exp_required_for_next_level(pet.level)
    return gained


def normalize_progress(pet: PetRecord) -> int:
    """Convert surplus experience into levels without any rewards. Returns levels gained."""

    gained = _roll_over_levels(pet)
    if gained:
        logger.info("Normalized stored progress", extra={"levels": gained, "level": pet.level})
    return gained


def award_experience(
    pet: PetRecord,
    amount: int,
    reason: str,
    *,
    now: datetime | None = None,
    catalog: AchievementCatalog | None = None,
) -> bool:
    """Add experience and apply any level-ups. Returns True if the pet leveled up."""

    if amount <= 0:
        return False
    now = now or utcnow()

    pet.experience += amount
    logger.info(
        "+%d EXP (%s)", amount, reason, extra={"total_exp": pet.experience, "level": pet.level}
    )

    gained = _roll_over_levels(pet)
    if not gained:
        return False

    pet.happiness = clamp_stat(pet.happiness + LEVEL_UP_HAPPINESS_BOOST * gained)
    pet.hunger = clamp_stat(pet.hunger + LEVEL_UP_HUNGER_BOOST * gained)
    logger.info(
        "%s reached level %d",
        pet.name,
        pet.level,
        extra={"levels_gained": gained, "next_level_exp": exp_required_for_next_level(pet.level)},
    )

    for threshold, key, description in LEVEL_ACHIEVEMENTS:
        if pet.level >= threshold:
            unlock_achievement(pet, key, description, now=now, catalog=catalog)
    return True


def unlock_achievement(
    pet: PetRecord,
    key: str,
    description: str,
    *,
    now: datetime | None = None,
    catalog: AchievementCatalog | None = None,
) -> bool:
    """Record ``key`` once and pay out its bonus. Returns False if it was already unlocked."""

    if key in pet.achievements:
        return False
    now = now or utcnow()
    catalog = catalog or DEFAULT_CATALOG

    # Record before paying the bonus: the bonus may level up and re-check achievements.
    pet.achievements[key] = now
    logger.info("Achievement unlocked: %s", description, extra={"achievement": key})

    bonus = catalog.bonus_for(key)
    if bonus > 0:
        award_experience(pet, bonus, f"Achievement Bonus: {description}", now=now, catalog=catalog)
    return True


__all__ = [
    "award_experience",
    "exp_required_for_next_level",
    "normalize_progress",
    "total_experience",
    "unlock_achievement",
]
