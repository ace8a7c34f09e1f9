import logging
import threading
from typing import Any, Iterable, Mapping, Optional

from . import session as transitions
from .engine import SessionEngine
from .models import (
    ConfigUpdate,
    Finished,
    InProgress,
    Lobby,
    QuestionView,
    QuizConfig,
    SessionState,
    SessionType,
    TrainerView,
    WordPool,
)
from .storage import ConfigStore, ProgressStore
from .vocabulary import load, mastery_count, reset_progress, training_count

logger = logging.getLogger(__name__)


class Trainer:
    """
    Holds the word pool, the session state and the quiz settings, and
    persists progress and settings at the points where they change.
    """

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]],
        progress_store: ProgressStore,
        config_store: ConfigStore,
        engine: Optional[SessionEngine] = None,
    ):
        self.progress_store = progress_store
        self.config_store = config_store
        self.engine = engine or SessionEngine()
        self.config: QuizConfig = config_store.load()
        self.pool: WordPool = load(records, progress_store.load())
        self.state: SessionState = Lobby()
        # Requests run in a threadpool; every read-modify-write holds this
        self._lock = threading.Lock()
        logger.info(f"Trainer ready with {len(self.pool.words)} words")

    def start(self, session_type: SessionType) -> SessionState:
        with self._lock:
            if session_type == SessionType.TRAINING and training_count(self.pool) == 0:
                logger.info("Training requested but no words are in training")
                return self.state
            self.state = transitions.start_session(
                self.state, self.pool, self.config, session_type, self.engine
            )
            return self.state

    def answer(self, answer: str) -> SessionState:
        with self._lock:
            state, pool = transitions.submit_answer(self.state, self.pool, answer)
            if pool is not self.pool:
                self.pool = pool
                self.progress_store.save(pool)
            self.state = state
            return self.state

    def advance(self) -> SessionState:
        with self._lock:
            self.state = transitions.advance(self.state, self.pool, self.engine)
            return self.state

    def back_to_lobby(self) -> SessionState:
        with self._lock:
            self.state = transitions.return_to_lobby(self.state)
            return self.state

    def update_config(self, update: ConfigUpdate) -> QuizConfig:
        changes = update.model_dump(exclude_none=True)
        with self._lock:
            if not changes:
                return self.config
            config = QuizConfig.model_validate({**self.config.model_dump(), **changes})
            self.config_store.save(config)
            self.config = config
        logger.info(f"Settings updated: {sorted(changes)}")
        return config

    def reset_progress(self):
        with self._lock:
            self.progress_store.clear()
            self.pool = reset_progress(self.pool)
            self.state = Lobby()
        logger.warning("Learning progress reset")

    def view(self) -> TrainerView:
        with self._lock:
            state, pool, config = self.state, self.pool, self.config
        view = TrainerView(
            phase=state.phase,
            limit=config.limit,
            mastery_count=mastery_count(pool),
            training_count=training_count(pool),
            config=config,
        )
        if isinstance(state, Lobby):
            return view

        session = state.session
        update = {
            "session_type": session.session_type,
            "solved_count": session.solved_count,
            "correct_count": session.correct_count,
            "limit": session.limit,
        }
        if isinstance(state, InProgress):
            question = state.question
            update["question"] = QuestionView(
                prompt_text=question.prompt_text,
                options=question.options,
                feedback=question.feedback,
                submitted_answer=question.submitted_answer,
                correct_answer=question.correct_answer if question.answered else None,
            )
        elif isinstance(state, Finished):
            update["score_percentage"] = session.score_percentage
        return view.model_copy(update=update)
