import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .config import settings
from .models import ProgressRecord, Word, WordPool

logger = logging.getLogger(__name__)


# --- Word source ---
class VocabularyManager:
    """Loads the word list CSV into plain records."""

    def __init__(
        self,
        path: str,
        id_column: str = settings.ID_COLUMN,
        prompt_column: str = settings.PROMPT_COLUMN,
        target_column: str = settings.TARGET_COLUMN,
    ):
        self.path = path
        self.columns = {id_column: "id", prompt_column: "prompt", target_column: "target"}

    def read_records(self) -> List[Dict[str, str]]:
        if not os.path.exists(self.path):
            logger.error(f"Word list {self.path} not found.")
            return []

        try:
            df = pd.read_csv(self.path, encoding="utf-8", dtype=str, keep_default_na=False)
        except Exception as e:
            logger.error(f"Failed to load {self.path}: {e}")
            return []

        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            logger.error(f"Skipping {self.path}: Missing columns {missing}.")
            return []

        df = df[list(self.columns)].rename(columns=self.columns)
        logger.info(f"Read {len(df)} rows from {self.path}")
        return df.to_dict("records")


# --- WordStore ---
def _clean(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def load(
    records: Iterable[Mapping[str, Any]],
    saved_progress: Optional[Mapping[str, ProgressRecord]] = None,
) -> WordPool:
    """Builds the pool, restoring counters for ids with saved progress."""
    saved_progress = saved_progress or {}
    words = []
    dropped = 0
    for record in records:
        word_id = _clean(record.get("id"))
        prompt = _clean(record.get("prompt"))
        target = _clean(record.get("target"))
        if not (word_id and prompt and target):
            dropped += 1
            continue

        saved = saved_progress.get(word_id)
        words.append(
            Word(
                id=word_id,
                prompt=prompt,
                target=target,
                wrong_count=saved.wrong_count if saved else 0,
                correct_total=saved.correct_total if saved else 0,
            )
        )

    if dropped:
        logger.debug(f"Dropped {dropped} incomplete rows")
    return WordPool(words=tuple(words))


def numeric_id(word: Word) -> Optional[int]:
    try:
        return int(word.id)
    except ValueError:
        return None


def filter_by_range(pool: WordPool, start: int, end: int) -> List[Word]:
    """Words whose numeric id lies in [start, end]; non-numeric ids never match."""
    selected = []
    for word in pool.words:
        value = numeric_id(word)
        if value is not None and start <= value <= end:
            selected.append(word)
    return selected


def rescore(word: Word, is_correct: bool) -> Word:
    if is_correct:
        return word.model_copy(
            update={"wrong_count": max(0, word.wrong_count - 1), "correct_total": 1}
        )
    return word.model_copy(update={"wrong_count": word.wrong_count + 1, "correct_total": 0})


def replace_word(pool: WordPool, updated: Word) -> WordPool:
    """Returns a new pool holding `updated` in place of the word with its id."""
    if pool.get(updated.id) is None:
        return pool
    words = tuple(updated if word.id == updated.id else word for word in pool.words)
    return pool.model_copy(update={"words": words})


def apply_answer_result(pool: WordPool, word_id: str, is_correct: bool) -> WordPool:
    """Returns a new pool with one word rescored; other Word objects are shared."""
    word = pool.get(word_id)
    if word is None:
        return pool
    return replace_word(pool, rescore(word, is_correct))


def reset_progress(pool: WordPool) -> WordPool:
    words = tuple(
        word.model_copy(update={"wrong_count": 0, "correct_total": 0}) for word in pool.words
    )
    return pool.model_copy(update={"words": words})


def progress_records(pool: WordPool) -> List[ProgressRecord]:
    return [
        ProgressRecord(id=w.id, wrong_count=w.wrong_count, correct_total=w.correct_total)
        for w in pool.words
    ]


# --- Lobby statistics ---
def mastery_count(pool: WordPool) -> int:
    return sum(w.correct_total for w in pool.words)


def training_count(pool: WordPool) -> int:
    return sum(1 for w in pool.words if w.in_training)
