import json
import logging
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from .database import get_db_connection
from .models import Direction, ProgressRecord, QuizConfig, WordPool, WordRange
from .vocabulary import progress_records

logger = logging.getLogger(__name__)

PROGRESS_KEY = "vocab-data"
MODE_KEY = "conf-mode"
RANGE_KEY = "conf-range"
LIMIT_KEY = "conf-limit"

_progress_list = TypeAdapter(List[ProgressRecord])


class KeyValueStore:
    """String values by key in the `storage` table."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        conn = get_db_connection(self.db_path)
        try:
            row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str):
        conn = get_db_connection(self.db_path)
        with conn:
            conn.execute(
                """
                INSERT INTO storage (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
        conn.close()

    def delete(self, key: str):
        conn = get_db_connection(self.db_path)
        with conn:
            conn.execute("DELETE FROM storage WHERE key = ?", (key,))
        conn.close()


class ProgressStore:
    """Per-word learning counters, stored as one JSON array."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load(self) -> Dict[str, ProgressRecord]:
        raw = self.kv.get(PROGRESS_KEY)
        if raw is None:
            return {}
        try:
            records = _progress_list.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt progress data: {e.error_count()} errors")
            return {}
        return {r.id: r for r in records}

    def save(self, pool: WordPool):
        payload = [r.model_dump(by_alias=True) for r in progress_records(pool)]
        self.kv.set(PROGRESS_KEY, json.dumps(payload, ensure_ascii=False))

    def clear(self):
        self.kv.delete(PROGRESS_KEY)


class ConfigStore:
    """Quiz settings; each key falls back to its default on its own."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _read(self, key: str, adapter: TypeAdapter, default):
        raw = self.kv.get(key)
        if raw is None:
            return default
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.warning(f"Ignoring corrupt setting {key!r}, using default")
            return default

    def load(self) -> QuizConfig:
        defaults = QuizConfig()
        direction = self._read(MODE_KEY, TypeAdapter(Direction), defaults.direction)
        word_range = self._read(RANGE_KEY, TypeAdapter(WordRange), defaults.word_range)
        limit = self._read(LIMIT_KEY, TypeAdapter(int), defaults.limit)
        if limit < 1:
            logger.warning(f"Ignoring invalid limit {limit}, using default")
            limit = defaults.limit
        return QuizConfig(direction=direction, word_range=word_range, limit=limit)

    def save(self, config: QuizConfig):
        self.kv.set(MODE_KEY, json.dumps(config.direction.value))
        self.kv.set(RANGE_KEY, config.word_range.model_dump_json())
        self.kv.set(LIMIT_KEY, json.dumps(config.limit))
