from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from schemas.abacus import AppSettings, UserStats

logger = logging.getLogger(__name__)


class TrainerStore:
    """Keeps learner settings and stats in one small JSON file."""

    def __init__(self, data_file: Path):
        self._data_file = data_file
        self._data_file.parent.mkdir(parents=True, exist_ok=True)
        self._store: Dict[str, Any] = self._read_file()
        self.settings = self._load(AppSettings, "settings")
        self.stats = self._load(UserStats, "stats")

    def _read_file(self) -> Dict[str, Any]:
        if not self._data_file.exists():
            return {}
        try:
            data = json.loads(self._data_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self._data_file, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: expected a JSON object", self._data_file)
            return {}
        return data

    def _load(self, model, key: str):
        try:
            return model(**self._store.get(key, {}))
        except (TypeError, ValidationError) as exc:
            logger.warning("Resetting %s from %s: %s", key, self._data_file, exc)
            return model()

    def persist_settings(self, settings: AppSettings) -> None:
        self.settings = settings
        self._store["settings"] = settings.model_dump()
        self._write()

    def persist_stats(self, stats: UserStats) -> None:
        self.stats = stats
        self._store["stats"] = stats.model_dump()
        self._write()

    def _write(self) -> None:
        self._data_file.write_text(json.dumps(self._store, indent=2), encoding="utf-8")
