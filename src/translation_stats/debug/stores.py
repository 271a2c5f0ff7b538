"""Settings and transient (expiring cache) stores.

Both are passed explicitly to whatever needs them; nothing reads them as
global state.
"""

import json
import re
import time
from pathlib import Path
from typing import Any, Optional

import yaml

from ..utils.logging import get_logger

logger = get_logger(__name__)

TRANSIENT_PREFIX = "_transient_"
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class SettingsStore:
    """Named options kept in a single YAML file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {self.path} must contain a mapping")
        return data

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._load().get(name, default)

    def update_option(self, name: str, value: Any) -> None:
        data = self._load()
        data[name] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)

    def delete_option(self, name: str) -> bool:
        data = self._load()
        if name not in data:
            return False
        del data[name]
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)
        return True


class TransientStore:
    """Expiring key/value entries stored as JSON files in a directory.

    Each entry lives in ``_transient_{key}.json``; an expiration of 0 means
    the entry never expires.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid transient key: {key!r}")
        return self.directory / f"{TRANSIENT_PREFIX}{key}.json"

    def set_transient(self, key: str, value: Any, expiration: int = 0) -> None:
        """Store a JSON-serializable value for ``expiration`` seconds."""
        path = self._path(key)
        expires_at = time.time() + expiration if expiration > 0 else 0
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"value": value, "expires_at": expires_at}, f, ensure_ascii=False)

    def get_transient(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when missing or expired."""
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            entry = json.load(f)
        if self._expired(entry):
            logger.debug(f"Transient {key} expired")
            path.unlink(missing_ok=True)
            return None
        return entry.get("value")

    def delete_transient(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def get_transients(self, prefix: str = "") -> list[str]:
        """Names (``_transient_{key}``) of live entries whose key starts with ``prefix``."""
        if not self.directory.exists():
            return []
        names = []
        for path in sorted(self.directory.glob(f"{TRANSIENT_PREFIX}{prefix}*.json")):
            try:
                with open(path, encoding="utf-8") as f:
                    entry = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable transient {path}: {e}")
                continue
            if not self._expired(entry):
                names.append(path.stem)
        return names

    @staticmethod
    def _expired(entry: dict) -> bool:
        expires_at = entry.get("expires_at", 0)
        return bool(expires_at) and expires_at < time.time()
