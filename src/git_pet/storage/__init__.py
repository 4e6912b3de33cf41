"""Storage abstractions for git-pet."""

from .models import ConfigRecord, Mood, PetRecord, PetState
from .state_store import StateStore, migrate_document

__all__ = [
    "ConfigRecord",
    "Mood",
    "PetRecord",
    "PetState",
    "StateStore",
    "migrate_document",
]
