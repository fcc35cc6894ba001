# settings_store.py - key/value persistence for usage counts and custom snippets

# The engine only ever talks to get(key) / set(key, value).
# - JsonSettingsStore keeps every key in one JSON document on disk
# - MemorySettingsStore is the in-process variant used by tests and embedded hosts

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Keys written by the engine
USAGE_KEY = "SnippetUsageCount"
CUSTOM_SNIPPETS_KEY = "CustomSnippets"


class MemorySettingsStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonSettingsStore:
    """
    Store every setting in a single JSON file.
    Args:
        path (str): file location, parent directories are created on first write.
    A missing or corrupted file reads as empty settings.
    """

    def __init__(self, path: str):
        self.path = path
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("settings %s unreadable, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("settings %s is not a JSON object, starting empty", self.path)
            return {}
        logger.debug("loaded %d settings keys from %s", len(data), self.path)
        return data

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        """Update one key and rewrite the file. OSError propagates to the caller."""
        self._data[key] = value
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
