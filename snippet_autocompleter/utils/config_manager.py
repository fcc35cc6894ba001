# config_manager.py - JSON config manager

import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULTS = {
    "max_results": 10,          # completions returned per request
    "budget_ms": 10.0,          # soft latency target for ranking
    "lookback_chars": 100,      # text_before window handed to the context parser
    "plugin_enabled": True,     # register the completion callback with the host
    "settings_path": os.path.join("data", "settings.json"),
}


class Config:
    def __init__(self, path="config.json", autosave=True):
        self.path = path
        self.autosave = autosave
        self.data = dict(DEFAULTS)
        self._load()

    def _load(self):
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf8") as f:
                    stored = json.load(f)
                if not isinstance(stored, dict):
                    raise ValueError("top level must be an object")
                self.data.update({k: v for k, v in stored.items() if k in DEFAULTS})
            except (OSError, ValueError) as e:
                logger.warning("config %s unreadable, using defaults: %s", self.path, e)
        elif self.autosave:
            self.save()

    def save(self):
        try:
            with open(self.path, "w", encoding="utf8") as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning("config save failed: %s", e)

    def get(self, key, default=None):
        return self.data.get(key, default)

    def items(self):
        return self.data.items()

    def set(self, key, val):
        """Coerce `val` to the type of the default and persist. Unknown keys raise KeyError."""
        if key not in DEFAULTS:
            raise KeyError(f"No such option: {key}")
        kind = type(DEFAULTS[key])
        if kind is bool and isinstance(val, str):
            val = val.strip().lower() in ("1", "true", "yes", "on")
        self.data[key] = kind(val)
        if self.autosave:
            self.save()
