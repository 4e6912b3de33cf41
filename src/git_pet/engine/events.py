"""Rewards for git events reported by hook scripts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Sequence

from ..catalog import AchievementCatalog
from ..storage import StateStore
from ..storage.models import PetRecord
from ..timeutils import utcnow
from .constants import (
    CLEAN_BRANCH,
    COMMIT_WITH_CHANGES,
    MERGE_SUCCESS,
    PUSH_CHANGES,
    RESOLVE_CONFLICT,
)
from .progression import award_experience, normalize_progress, total_experience, unlock_achievement

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EventReward:
    exp: int
    reason: str
    achievement_key: str | None = None
    achievement_description: str = ""


@dataclass(slots=True)
class ReactionOutcome:
    """What reacting to one event did to the pet."""

    event: str
    recognized: bool
    exp_awarded: int = 0
    levels_gained: int = 0
    achievements_unlocked: list[str] = field(default_factory=list)
    saved: bool = False


def _post_commit(args: Sequence[str]) -> EventReward | None:
    if "--changes" not in args:
        logger.info("Skipping EXP for commit: hook indicated no file changes")
        return None
    return EventReward(COMMIT_WITH_CHANGES, "Commit with Changes", "FIRST_COMMIT", "First Commit!")


def _post_merge(args: Sequence[str]) -> EventReward:
    if "--was-conflict" in args:
        return EventReward(
            RESOLVE_CONFLICT, "Conflict Resolved", "FIRST_CONFLICT_RESOLVED", "Resolved First Conflict"
        )
    return EventReward(MERGE_SUCCESS, "Branch Merged", "FIRST_MERGE", "First Merge!")


def _pre_push(args: Sequence[str]) -> EventReward:
    return EventReward(PUSH_CHANGES, "Push Attempted")


def _branch_deleted(args: Sequence[str]) -> EventReward | None:
    if "--was-old" in args:
        return EventReward(CLEAN_BRANCH, "Old Branch Cleaned")
    if "--was-merged" in args:
        return EventReward(CLEAN_BRANCH, "Merged Branch Cleaned")
    logger.info("Skipping EXP for branch delete: hook gave no reason (old/merged)")
    return None


EVENT_HANDLERS: dict[str, Callable[[Sequence[str]], EventReward | None]] = {
    "post-commit": _post_commit,
    "post-merge": _post_merge,
    "pre-push": _pre_push,
    "branch-deleted": _branch_deleted,
}


def apply_event(
    pet: PetRecord,
    event_name: str,
    event_args: Sequence[str] = (),
    *,
    now: datetime | None = None,
    catalog: AchievementCatalog | None = None,
) -> ReactionOutcome:
    """Apply the reward for one event to ``pet`` in memory."""

    handler = EVENT_HANDLERS.get(event_name)
    if handler is None:
        logger.warning("Unknown event type received: %s", event_name, extra={"event_args": list(event_args)})
        return ReactionOutcome(event=event_name, recognized=False)

    now = now or utcnow()
    outcome = ReactionOutcome(event=event_name, recognized=True)
    reward = handler(event_args)
    if reward is None:
        return outcome

    level_before = pet.level
    exp_before = total_experience(pet)
    unlocked_before = set(pet.achievements)

    award_experience(pet, reward.exp, reward.reason, now=now, catalog=catalog)
    if reward.achievement_key:
        unlock_achievement(
            pet, reward.achievement_key, reward.achievement_description, now=now, catalog=catalog
        )

    outcome.exp_awarded = total_experience(pet) - exp_before
    outcome.levels_gained = pet.level - level_before
    outcome.achievements_unlocked = [key for key in pet.achievements if key not in unlocked_before]
    return outcome


def process_event(
    event_name: str,
    event_args: Sequence[str] = (),
    *,
    store: StateStore,
    catalog: AchievementCatalog | None = None,
    now: datetime | None = None,
) -> ReactionOutcome:
    """Load the pet, reward it for ``event_name`` and save it: one full cycle."""

    now = now or utcnow()
    state = store.load()
    normalize_progress(state.global_pet)
    logger.debug("Reacting to event", extra={"event": event_name, "event_args": list(event_args)})

    outcome = apply_event(state.global_pet, event_name, event_args, now=now, catalog=catalog)
    outcome.saved = store.save(state)
    return outcome


__all__ = [
    "EVENT_HANDLERS",
    "EventReward",
    "ReactionOutcome",
    "apply_event",
    "process_event",
]
