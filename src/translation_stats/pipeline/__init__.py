"""Translation update pipeline."""

from .locking import CatalogLocks, LockTimeout
from .updater import TranslationUpdater, UpdateState

__all__ = [
    "CatalogLocks",
    "LockTimeout",
    "TranslationUpdater",
    "UpdateState",
]
