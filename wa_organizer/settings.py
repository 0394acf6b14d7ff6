"""Persisted Gemini settings: the API key and the endpoint URL.

Both values live in a small JSON file under fixed keys, read once at startup
and written back whenever either one changes.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_API_ENDPOINT

LOGGER = logging.getLogger(__name__)

STORAGE_KEYS = {
    "api_key": "gemini_api_key",
    "api_endpoint": "gemini_api_endpoint",
}


@dataclass
class Settings:
    api_key: str = ""
    api_endpoint: str = DEFAULT_API_ENDPOINT

    def missing_fields(self):
        return [name for name in ("api_key", "api_endpoint") if not getattr(self, name).strip()]


class SettingsStore:
    def __init__(self, path, defaults=None):
        self.path = Path(path)
        self.defaults = defaults or Settings()

    def _read(self):
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning(
                "event=load_settings status=error path=%s error=%s",
                self.path,
                exc.__class__.__name__,
            )
            return {}
        return data if isinstance(data, dict) else {}

    def load(self):
        stored = self._read()
        values = {}
        for field, storage_key in STORAGE_KEYS.items():
            value = stored.get(storage_key)
            # fall back per key, like a missing localStorage entry
            values[field] = value if isinstance(value, str) else getattr(self.defaults, field)
        LOGGER.info(
            "event=load_settings status=finished path=%s stored_keys=%d",
            self.path,
            sum(1 for key in STORAGE_KEYS.values() if isinstance(stored.get(key), str)),
        )
        return Settings(**values)

    def save(self, settings):
        stored = self._read()
        for field, storage_key in STORAGE_KEYS.items():
            stored[storage_key] = getattr(settings, field)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(stored, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("event=save_settings status=finished path=%s", self.path)
