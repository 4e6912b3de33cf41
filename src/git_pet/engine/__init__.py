"""The pet's decay, mood and progression rules."""

from .decay import apply_decay
from .events import ReactionOutcome, apply_event, process_event
from .interactions import feed, play, rename
from .mood import MoodResult, resolve_mood
from .progression import (
    award_experience,
    exp_required_for_next_level,
    normalize_progress,
    unlock_achievement,
)

__all__ = [
    "MoodResult",
    "ReactionOutcome",
    "apply_decay",
    "apply_event",
    "award_experience",
    "exp_required_for_next_level",
    "feed",
    "normalize_progress",
    "play",
    "process_event",
    "rename",
    "resolve_mood",
    "unlock_achievement",
]
