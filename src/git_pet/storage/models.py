"""Persisted pet and configuration records."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PET_NAME = "Git Pet"
MAX_NAME_LENGTH = 50
DEFAULT_HUNGER = 50
DEFAULT_HAPPINESS = 50


class Mood(str, Enum):
    NEUTRAL = "neutral"
    HAPPY = "happy"
    SAD = "sad"
    BORED = "bored"
    STRESSED = "stressed"
    THINKING = "thinking"
    CONFUSED = "confused"


class PetRecord(BaseModel):
    """The single global pet."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default=DEFAULT_PET_NAME, min_length=1, max_length=MAX_NAME_LENGTH)
    mood: Mood = Mood.NEUTRAL
    hunger: int = Field(default=DEFAULT_HUNGER, ge=0, le=100)
    happiness: int = Field(default=DEFAULT_HAPPINESS, ge=0, le=100)
    last_fed: datetime | None = Field(default=None, alias="lastFed")
    last_played: datetime | None = Field(default=None, alias="lastPlayed")
    last_commit_timestamp: datetime | None = Field(default=None, alias="lastCommitTimestamp")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_status_update: datetime | None = Field(default=None, alias="lastStatusUpdate")
    animation_frame: int = Field(default=0, ge=0, alias="animationFrame")
    repo_root_dir: str | None = Field(default=None, alias="repoRootDir")
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    achievements: dict[str, datetime] = Field(
        default_factory=dict,
        description="Achievement key -> unlock time. Keys are never removed or re-timed.",
    )

    @field_validator(
        "last_fed",
        "last_played",
        "last_commit_timestamp",
        "created_at",
        "last_status_update",
    )
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def fresh(cls, now: datetime) -> "PetRecord":
        """A newly hatched pet whose clocks all start at ``now``."""
        return cls(
            created_at=now,
            last_fed=now,
            last_played=now,
            last_status_update=now,
        )


class ConfigRecord(BaseModel):
    """User-facing options persisted next to the pet."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    check_remote_status: bool = Field(default=False, alias="checkRemoteStatus")


class PetState(BaseModel):
    """The full persisted document."""

    model_config = ConfigDict(populate_by_name=True)

    global_pet: PetRecord = Field(default_factory=PetRecord, alias="globalPet")
    config: ConfigRecord = Field(default_factory=ConfigRecord)

    @classmethod
    def fresh(cls, now: datetime) -> "PetState":
        return cls(global_pet=PetRecord.fresh(now), config=ConfigRecord())


__all__ = [
    "ConfigRecord",
    "DEFAULT_HAPPINESS",
    "DEFAULT_HUNGER",
    "DEFAULT_PET_NAME",
    "MAX_NAME_LENGTH",
    "Mood",
    "PetRecord",
    "PetState",
]
