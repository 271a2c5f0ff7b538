"""Debug display of settings and cached data."""

from .reporter import DebugReporter
from .stores import SettingsStore, TransientStore

__all__ = [
    "DebugReporter",
    "SettingsStore",
    "TransientStore",
]
