"""JSON file persistence for the pet state."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from ..timeutils import clamp_stat, parse_timestamp, to_int, utcnow
from .models import (
    DEFAULT_HAPPINESS,
    DEFAULT_HUNGER,
    DEFAULT_PET_NAME,
    MAX_NAME_LENGTH,
    Mood,
    PetRecord,
    PetState,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_FIELDS = (
    "lastFed",
    "lastPlayed",
    "lastCommitTimestamp",
    "createdAt",
    "lastStatusUpdate",
)


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    return default


def _migrate_pet(stored: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    """Merge stored pet fields over defaults, repairing each field independently."""

    pet = PetRecord.fresh(now).model_dump(by_alias=True)
    pet.update({key: value for key, value in stored.items() if key in pet})

    name = pet["name"]
    if not isinstance(name, str) or not name.strip() or len(name.strip()) > MAX_NAME_LENGTH:
        pet["name"] = DEFAULT_PET_NAME
    else:
        pet["name"] = name.strip()

    mood = pet["mood"]
    valid_moods = {member.value for member in Mood}
    pet["mood"] = mood if isinstance(mood, str) and mood in valid_moods else Mood.NEUTRAL.value

    for key, default in (("hunger", DEFAULT_HUNGER), ("happiness", DEFAULT_HAPPINESS)):
        value = pet[key]
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            pet[key] = default
            continue
        try:
            pet[key] = clamp_stat(float(value))
        except ValueError:
            pet[key] = default

    # A record that already carries history keeps its gaps empty; only a
    # record with no usable timestamps at all starts its clocks at ``now``.
    has_history = any(parse_timestamp(stored.get(key)) is not None for key in _TIMESTAMP_FIELDS)
    for key in _TIMESTAMP_FIELDS:
        if has_history and key not in stored:
            pet[key] = None
        else:
            pet[key] = parse_timestamp(pet[key])

    pet["animationFrame"] = max(0, to_int(pet["animationFrame"], 0))
    root = pet["repoRootDir"]
    pet["repoRootDir"] = root if isinstance(root, str) and root else None

    level = to_int(pet["level"], 1)
    pet["level"] = level if level >= 1 else 1
    experience = to_int(pet["experience"], 0)
    pet["experience"] = experience if experience >= 0 else 0

    achievements = pet["achievements"]
    if not isinstance(achievements, Mapping):
        achievements = {}
    migrated: dict[str, datetime] = {}
    for key, unlocked_at in achievements.items():
        stamp = parse_timestamp(unlocked_at)
        if stamp is None:
            # Keep the unlock; only its time was lost.
            logger.warning("Achievement has unreadable unlock time", extra={"achievement": key})
            stamp = now
        migrated[str(key)] = stamp
    pet["achievements"] = migrated
    return pet


def migrate_document(raw: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    """Bring a stored document of any past shape up to the current layout."""

    stored_pet = raw.get("globalPet")
    if not isinstance(stored_pet, Mapping):
        stored_pet = {}

    config: dict[str, Any] = {}
    legacy_config = stored_pet.get("config")
    if isinstance(legacy_config, Mapping):
        config.update(legacy_config)
    if isinstance(raw.get("config"), Mapping):
        config.update(raw["config"])

    return {
        "globalPet": _migrate_pet(stored_pet, now),
        "config": {
            "checkRemoteStatus": _coerce_bool(config.get("checkRemoteStatus"), False),
        },
    }


class StateStore:
    """Load and save the pet state document at a fixed path.

    Loading never raises: a missing file yields a fresh pet, an unreadable one
    yields an in-memory default and the file is left alone.
    """

    def __init__(self, path: Path, *, clock: Callable[[], datetime] | None = None) -> None:
        self._path = Path(path)
        self._clock = clock or utcnow

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PetState:
        now = self._clock()
        if not self._path.exists():
            state = PetState.fresh(now)
            logger.info("Hatching a new pet", extra={"path": str(self._path)})
            try:
                self._write(state)
            except OSError as exc:
                logger.error("Could not create state file", extra={"path": str(self._path), "error": str(exc)})
            return state

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error(
                "Error loading state file, using defaults",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return PetState.fresh(now)

        if not isinstance(raw, dict):
            logger.error(
                "State file does not hold an object, using defaults",
                extra={"path": str(self._path)},
            )
            return PetState.fresh(now)

        try:
            return PetState.model_validate(migrate_document(raw, now))
        except ValidationError as exc:  # pragma: no cover - migration repairs every field
            logger.error("State file failed validation, using defaults", extra={"error": str(exc)})
            return PetState.fresh(now)

    def save(self, state: PetState | Mapping[str, Any]) -> bool:
        """Validate and write ``state``. Returns False (and writes nothing) if it is invalid."""

        payload = state.model_dump(by_alias=True) if isinstance(state, PetState) else state
        try:
            validated = PetState.model_validate(payload)
        except ValidationError as exc:
            logger.error(
                "Refusing to save invalid pet state",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return False

        try:
            self._write(validated)
        except OSError as exc:
            logger.error("Error saving state file", extra={"path": str(self._path), "error": str(exc)})
            return False
        return True

    def _write(self, state: PetState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        document = state.model_dump_json(by_alias=True, indent=2)
        fd, tmp_name = tempfile.mkstemp(prefix=".state-", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
                handle.write("\n")
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["StateStore", "migrate_document"]
