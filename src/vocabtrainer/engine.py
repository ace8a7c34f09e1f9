import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .models import Direction, Question, Session, SessionType, Word, WordPool
from .vocabulary import filter_by_range, rescore

logger = logging.getLogger(__name__)

NUM_DISTRACTORS = 3


# --- Strategy Pattern: Word Selectors ---
class WordSelector(ABC):
    """Picks the next word to ask from the words still available."""

    @abstractmethod
    def select(self, available: Sequence[Word], rng: random.Random) -> Optional[Word]:
        pass


class RandomWordSelector(WordSelector):
    """Normal mode: uniform choice over the available words."""

    def select(self, available: Sequence[Word], rng: random.Random) -> Optional[Word]:
        if not available:
            return None
        return rng.choice(available)


class TrainingWordSelector(WordSelector):
    """Training mode: the word with the most mistakes, first one on ties."""

    def select(self, available: Sequence[Word], rng: random.Random) -> Optional[Word]:
        best = None
        for word in available:
            if best is None or word.wrong_count > best.wrong_count:
                best = word
        return best


class SelectorFactory:
    """Factory to select the appropriate selector."""

    @staticmethod
    def create(session_type: SessionType) -> WordSelector:
        if session_type == SessionType.TRAINING:
            return TrainingWordSelector()
        return RandomWordSelector()


def score_answer(word: Word, submitted_answer: str, correct_answer: str) -> Tuple[bool, Word]:
    is_correct = submitted_answer == correct_answer
    return is_correct, rescore(word, is_correct)


class SessionEngine:
    """Question building and word selection for a running session."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def available_words(self, pool: WordPool, session: Session) -> List[Word]:
        used = set(session.used_ids)
        in_range = filter_by_range(pool, session.word_range.start, session.word_range.end)
        return [w for w in in_range if w.id not in used]

    def pick_next(self, available: Sequence[Word], session_type: SessionType) -> Optional[Word]:
        return SelectorFactory.create(session_type).select(available, self.rng)

    def build_options(self, word: Word, mode: Direction, pool: WordPool) -> List[str]:
        """Correct answer plus up to three distinct distractors, shuffled."""
        correct = word.answer_text(mode)
        candidates = list(
            dict.fromkeys(
                w.answer_text(mode) for w in pool.words if w.answer_text(mode) != correct
            )
        )

        # Small pools give fewer options rather than placeholder answers
        wrong = self.rng.sample(candidates, min(NUM_DISTRACTORS, len(candidates)))

        options = [correct] + wrong
        self.rng.shuffle(options)
        return options

    def setup_question(
        self, session: Session, word: Word, pool: WordPool
    ) -> Tuple[Session, Question]:
        question = Question(
            word_id=word.id,
            prompt_text=word.question_text(session.mode),
            correct_answer=word.answer_text(session.mode),
            options=tuple(self.build_options(word, session.mode, pool)),
        )
        session = session.model_copy(update={"used_ids": session.used_ids + (word.id,)})
        return session, question

    def next_question(
        self, session: Session, pool: WordPool
    ) -> Optional[Tuple[Session, Question]]:
        word = self.pick_next(self.available_words(pool, session), session.session_type)
        if word is None:
            return None
        return self.setup_question(session, word, pool)
