"""Achievement catalogue models and loader exports."""

from .loader import AchievementCatalog, CatalogLoadError, CatalogLoader, load_catalog
from .models import BUILTIN_ACHIEVEMENTS, AchievementDefinition

__all__ = [
    "AchievementCatalog",
    "AchievementDefinition",
    "BUILTIN_ACHIEVEMENTS",
    "CatalogLoadError",
    "CatalogLoader",
    "load_catalog",
]
