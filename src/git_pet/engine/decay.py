"""Time-based decay of hunger and happiness."""

from __future__ import annotations

import logging
from datetime import datetime

from ..storage.models import PetRecord
from ..timeutils import clamp_stat, hours_between, latest_timestamp
from .constants import BOREDOM_DECAY_RATE, HUNGER_DECAY_RATE, MIN_DECAY_HOURS

logger = logging.getLogger(__name__)


def decay_reference(pet: PetRecord) -> datetime | None:
    """The moment decay is measured from: the latest recorded interaction or checkpoint."""

    return latest_timestamp(
        (pet.last_fed, pet.last_played, pet.created_at, pet.last_status_update)
    )


def apply_decay(pet: PetRecord, now: datetime) -> bool:
    """Advance hunger and happiness to ``now``. Returns True if either stat changed.

    ``last_status_update`` is moved to ``now`` only when a stat actually moved,
    so sub-unit decay from rapid invocations keeps accumulating instead of
    being rounded away.
    """

    reference = decay_reference(pet)
    if reference is None:
        logger.debug("No valid timestamp to decay from; skipping")
        return False

    elapsed_hours = hours_between(reference, now)
    if elapsed_hours <= MIN_DECAY_HOURS:
        return False

    hunger = clamp_stat(pet.hunger - elapsed_hours * HUNGER_DECAY_RATE)
    happiness = clamp_stat(pet.happiness - elapsed_hours * BOREDOM_DECAY_RATE)
    if hunger == pet.hunger and happiness == pet.happiness:
        return False

    logger.debug(
        "Applied decay",
        extra={
            "elapsed_hours": round(elapsed_hours, 3),
            "hunger": (pet.hunger, hunger),
            "happiness": (pet.happiness, happiness),
        },
    )
    pet.hunger = hunger
    pet.happiness = happiness
    pet.last_status_update = now
    return True


__all__ = ["apply_decay", "decay_reference"]
