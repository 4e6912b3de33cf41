"""Achievement definitions."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class AchievementDefinition(BaseModel):
    """Describes a one-time milestone the pet can unlock."""

    key: str = Field(..., description="Stable identifier stored in the pet's achievement ledger.")
    name: str = Field(..., description="Display name shown when listing achievements.")
    description: str = Field(default="", description="What the user did to earn it.")
    bonus_exp: int = Field(
        default=0,
        ge=0,
        description="Experience granted once, at the moment of unlocking.",
    )

    @field_validator("key")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not normalized:
            raise ValueError("Achievement key must not be empty")
        return normalized


BUILTIN_ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        key="FIRST_COMMIT",
        name="First Commit!",
        description="Made your first commit since the pet started watching.",
        bonus_exp=25,
    ),
    AchievementDefinition(
        key="FIRST_MERGE",
        name="Merge Master!",
        description="Successfully merged a branch for the first time.",
        bonus_exp=30,
    ),
    AchievementDefinition(
        key="FIRST_CONFLICT_RESOLVED",
        name="Conflict Conqueror!",
        description="Resolved your first merge conflict.",
        bonus_exp=50,
    ),
    AchievementDefinition(
        key="REACH_LEVEL_5",
        name="Level 5!",
        description="Reached Level 5. Keep it up!",
        bonus_exp=100,
    ),
    AchievementDefinition(
        key="REACH_LEVEL_10",
        name="Level 10!",
        description="Reached Level 10. Impressive!",
        bonus_exp=250,
    ),
)


__all__ = ["AchievementDefinition", "BUILTIN_ACHIEVEMENTS"]
