"""Achievement catalogue loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .models import BUILTIN_ACHIEVEMENTS, AchievementDefinition


class CatalogLoadError(RuntimeError):
    """Raised when one or more catalogue files cannot be parsed."""


class AchievementCatalog(Mapping[str, AchievementDefinition]):
    """Read-only mapping of achievement key to definition."""

    def __init__(self, definitions: Iterable[AchievementDefinition] = BUILTIN_ACHIEVEMENTS) -> None:
        self._definitions = {definition.key: definition for definition in definitions}

    def __getitem__(self, key: str) -> AchievementDefinition:
        return self._definitions[key]

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def bonus_for(self, key: str) -> int:
        definition = self._definitions.get(key)
        return definition.bonus_exp if definition is not None else 0

    def display_name(self, key: str) -> str:
        definition = self._definitions.get(key)
        if definition is not None:
            return definition.name
        return key.replace("_", " ").title()


class CatalogLoader:
    """Loads achievement definitions from YAML files on top of the built-in set."""

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.exists()]

    @property
    def search_paths(self) -> list[Path]:
        """Return the normalized search paths."""

        return list(self._search_paths)

    def load_all(self) -> AchievementCatalog:
        """Load the catalogue.

        Later search paths override earlier ones (and the built-ins) when keys collide.
        """

        definitions = {definition.key: definition for definition in BUILTIN_ACHIEVEMENTS}
        errors: list[str] = []

        for base in self._search_paths:
            files = [base] if base.is_file() else sorted(base.glob("*.yml")) + sorted(base.glob("*.yaml"))
            for path in files:
                try:
                    document = yaml.safe_load(path.read_text(encoding="utf-8"))
                except yaml.YAMLError as exc:
                    errors.append(f"Failed to parse YAML in {path}: {exc}")
                    continue

                if document is None:
                    continue

                entries: list[Any] = document if isinstance(document, list) else [document]
                for entry in entries:
                    try:
                        definition = AchievementDefinition.model_validate(entry)
                    except ValidationError as exc:
                        errors.append(f"Achievement validation error in {path}: {exc}")
                        continue
                    definitions[definition.key] = definition

        if errors:
            raise CatalogLoadError("; ".join(errors))

        return AchievementCatalog(definitions.values())


def load_catalog(search_paths: Iterable[Path] | None = None) -> AchievementCatalog:
    """Convenience wrapper for loading the catalogue from the provided paths."""

    loader = CatalogLoader(search_paths)
    return loader.load_all()


__all__ = ["AchievementCatalog", "CatalogLoadError", "CatalogLoader", "load_catalog"]
