"""git-pet: a virtual pet that lives in your git repository."""

__version__ = "0.3.0"

__all__ = ["__version__"]
