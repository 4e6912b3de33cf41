"""Derive the pet's mood from its needs and the repository snapshot.

The core of the resolver is ``MOOD_RULES``: an ordered tuple of rules where the
first rule whose predicate holds decides the mood. Repository trouble outranks
basic needs, which outrank environmental boredom. Well-met needs, recent feeding
or play, and a newly observed commit can then lift a neutral or bored pet to
happy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from ..git.models import RepositorySnapshot
from ..storage.models import Mood, PetRecord
from ..timeutils import clamp_stat, hours_since, latest_timestamp
from .constants import (
    AHEAD_THRESHOLD,
    BEHIND_HAPPINESS_PENALTY,
    BEHIND_THRESHOLD,
    BOREDOM_THRESHOLD_HOURS,
    CARED_FOR_HAPPINESS_ABOVE,
    CARED_FOR_MINUTES,
    COMMIT_HAPPINESS_BOOST,
    CONTENT_HAPPINESS_ABOVE,
    CONTENT_HUNGER_ABOVE,
    HUNGRY_BELOW,
    LOW_HAPPINESS_BELOW,
    OLD_BRANCH_LIMIT,
    OLD_BRANCH_WEEKS,
    PLAY_BOREDOM_FACTOR,
    STRESS_THRESHOLD_HOURS,
    TRUNK_BRANCH_NAMES,
)
from .decay import apply_decay

logger = logging.getLogger(__name__)

NOT_A_REPOSITORY_REASON = "not in a git repository"
DEFAULT_REASON = "default"
NEEDS_MET_REASON = "needs met"
NEW_COMMIT_REASON = "new commit detected"
CARED_FOR_REASON = "recently cared for"

_NEGATIVE_MOODS = frozenset({Mood.STRESSED, Mood.SAD})


@dataclass(frozen=True, slots=True)
class MoodResult:
    mood: Mood
    reason: str


@dataclass(slots=True)
class MoodContext:
    """Everything a rule may look at. Rules may adjust ``pet`` stats as a side effect."""

    pet: PetRecord
    snapshot: RepositorySnapshot
    now: datetime


@dataclass(frozen=True, slots=True)
class MoodRule:
    name: str
    applies: Callable[[MoodContext], bool]
    outcome: Callable[[MoodContext], MoodResult]


def count_old_branches(snapshot: RepositorySnapshot, now: datetime) -> int:
    """Branches untouched for ``OLD_BRANCH_WEEKS``, ignoring trunks and the current branch."""

    cutoff = now - timedelta(weeks=OLD_BRANCH_WEEKS)
    return sum(
        1
        for branch in snapshot.branches
        if branch.last_commit_time is not None
        and branch.last_commit_time < cutoff
        and branch.name not in TRUNK_BRANCH_NAMES
        and branch.name != snapshot.current_branch
    )


def _hours_since_commit(ctx: MoodContext) -> float | None:
    return hours_since(ctx.snapshot.last_commit_timestamp, ctx.now)


def _behind_outcome(ctx: MoodContext) -> MoodResult:
    ctx.pet.happiness = clamp_stat(ctx.pet.happiness - BEHIND_HAPPINESS_PENALTY)
    return MoodResult(Mood.SAD, f"behind remote by {ctx.snapshot.behind_count} commits")


def _uncommitted_outcome(ctx: MoodContext) -> MoodResult:
    age = _hours_since_commit(ctx)
    if age is not None and age > STRESS_THRESHOLD_HOURS:
        return MoodResult(Mood.STRESSED, "old uncommitted changes")
    return MoodResult(Mood.THINKING, "uncommitted changes present")


def _stale_commit(ctx: MoodContext) -> bool:
    age = _hours_since_commit(ctx)
    return age is not None and age > BOREDOM_THRESHOLD_HOURS


def _not_played(ctx: MoodContext) -> bool:
    age = hours_since(ctx.pet.last_played, ctx.now)
    return age is not None and age > BOREDOM_THRESHOLD_HOURS * PLAY_BOREDOM_FACTOR


def _recently_cared_for(pet: PetRecord, now: datetime) -> bool:
    age = hours_since(latest_timestamp((pet.last_fed, pet.last_played)), now)
    return (
        age is not None
        and age * 60 < CARED_FOR_MINUTES
        and pet.happiness > CARED_FOR_HAPPINESS_ABOVE
    )


MOOD_RULES: tuple[MoodRule, ...] = (
    MoodRule(
        "conflicts",
        lambda ctx: ctx.snapshot.has_conflicts,
        lambda ctx: MoodResult(Mood.STRESSED, "merge conflicts detected"),
    ),
    MoodRule(
        "behind_remote",
        lambda ctx: ctx.snapshot.behind_count > BEHIND_THRESHOLD,
        _behind_outcome,
    ),
    MoodRule(
        "ahead_of_remote",
        lambda ctx: ctx.snapshot.ahead_count > AHEAD_THRESHOLD,
        lambda ctx: MoodResult(Mood.THINKING, f"ahead of remote by {ctx.snapshot.ahead_count} commits"),
    ),
    MoodRule(
        "uncommitted_changes",
        lambda ctx: ctx.snapshot.has_uncommitted_changes,
        _uncommitted_outcome,
    ),
    MoodRule(
        "hungry",
        lambda ctx: ctx.pet.hunger < HUNGRY_BELOW,
        lambda ctx: MoodResult(Mood.SAD, "hungry"),
    ),
    MoodRule(
        "low_happiness",
        lambda ctx: ctx.pet.happiness < LOW_HAPPINESS_BELOW,
        lambda ctx: MoodResult(Mood.BORED, "low happiness"),
    ),
    MoodRule(
        "old_branches",
        lambda ctx: count_old_branches(ctx.snapshot, ctx.now) > OLD_BRANCH_LIMIT,
        lambda ctx: MoodResult(
            Mood.BORED, f"{count_old_branches(ctx.snapshot, ctx.now)} old branches detected"
        ),
    ),
    MoodRule(
        "no_recent_commit",
        _stale_commit,
        lambda ctx: MoodResult(Mood.BORED, "no recent commit"),
    ),
    MoodRule(
        "not_played_with",
        _not_played,
        lambda ctx: MoodResult(Mood.BORED, "not played with recently"),
    ),
)


def evaluate_rules(
    ctx: MoodContext, rules: tuple[MoodRule, ...] = MOOD_RULES
) -> tuple[MoodResult, str | None]:
    """Return the first matching rule's outcome and its name (None for the default)."""

    for rule in rules:
        if rule.applies(ctx):
            return rule.outcome(ctx), rule.name
    return MoodResult(Mood.NEUTRAL, DEFAULT_REASON), None


def resolve_mood(pet: PetRecord, snapshot: RepositorySnapshot, now: datetime) -> MoodResult:
    """Decay the pet to ``now``, then settle its mood for this snapshot.

    Mutates ``pet.mood``, ``pet.happiness``, ``pet.last_commit_timestamp`` and
    ``pet.repo_root_dir``.
    """

    apply_decay(pet, now)

    if not snapshot.is_git_repo:
        pet.repo_root_dir = None
        pet.mood = Mood.CONFUSED
        return MoodResult(Mood.CONFUSED, NOT_A_REPOSITORY_REASON)

    if pet.repo_root_dir != snapshot.repo_root_dir:
        logger.info(
            "Pet moved to a new repository",
            extra={"previous": pet.repo_root_dir, "current": snapshot.repo_root_dir},
        )
        pet.repo_root_dir = snapshot.repo_root_dir

    result, rule_name = evaluate_rules(MoodContext(pet=pet, snapshot=snapshot, now=now))

    commit_boost = False
    new_commit = snapshot.last_commit_timestamp
    if new_commit is not None and new_commit != pet.last_commit_timestamp:
        if result.mood not in _NEGATIVE_MOODS:
            pet.happiness = clamp_stat(pet.happiness + COMMIT_HAPPINESS_BOOST)
            commit_boost = True
        pet.last_commit_timestamp = new_commit

    if result.mood in (Mood.NEUTRAL, Mood.BORED):
        if pet.happiness > CONTENT_HAPPINESS_ABOVE and pet.hunger > CONTENT_HUNGER_ABOVE:
            result = MoodResult(Mood.HAPPY, NEEDS_MET_REASON)
        elif _recently_cared_for(pet, now):
            result = MoodResult(Mood.HAPPY, CARED_FOR_REASON)
    if commit_boost and result.mood not in _NEGATIVE_MOODS:
        result = MoodResult(Mood.HAPPY, NEW_COMMIT_REASON)

    logger.debug(
        "Mood resolved",
        extra={"mood": result.mood.value, "reason": result.reason, "rule": rule_name},
    )
    pet.mood = result.mood
    return result


__all__ = [
    "CARED_FOR_REASON",
    "DEFAULT_REASON",
    "MOOD_RULES",
    "MoodContext",
    "MoodResult",
    "MoodRule",
    "NEEDS_MET_REASON",
    "NEW_COMMIT_REASON",
    "NOT_A_REPOSITORY_REASON",
    "count_old_branches",
    "evaluate_rules",
    "resolve_mood",
]
