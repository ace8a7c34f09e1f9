"""
Session lifecycle as explicit transitions: Lobby -> InProgress -> Finished -> Lobby.

Every function returns new values. A call that is not valid for the given
state returns its inputs unchanged.
"""

import logging
from typing import Tuple

from .engine import SessionEngine, score_answer
from .models import (
    Feedback,
    Finished,
    InProgress,
    Lobby,
    QuizConfig,
    Session,
    SessionState,
    SessionType,
    WordPool,
)
from .vocabulary import replace_word

logger = logging.getLogger(__name__)


def start_session(
    state: SessionState,
    pool: WordPool,
    config: QuizConfig,
    session_type: SessionType,
    engine: SessionEngine,
) -> SessionState:
    if isinstance(state, InProgress):
        return state

    session = Session(
        mode=config.direction,
        session_type=session_type,
        limit=config.limit,
        word_range=config.word_range,
    )
    prepared = engine.next_question(session, pool)
    if prepared is None:
        logger.warning(
            f"No words in range {config.word_range.start}-{config.word_range.end}; "
            "session not started"
        )
        return Lobby()

    session, question = prepared
    logger.info(
        f"Session started [Type: {session_type.value}, Mode: {config.direction.value}, "
        f"Limit: {config.limit}]"
    )
    return InProgress(session=session, question=question)


def submit_answer(
    state: SessionState, pool: WordPool, answer: str
) -> Tuple[SessionState, WordPool]:
    if not isinstance(state, InProgress) or state.question.answered:
        return state, pool

    question = state.question
    word = pool.get(question.word_id)
    if word is None:
        return state, pool

    is_correct, updated = score_answer(word, answer, question.correct_answer)
    pool = replace_word(pool, updated)

    session = state.session
    if is_correct:
        session = session.model_copy(update={"correct_count": session.correct_count + 1})
    question = question.model_copy(
        update={
            "feedback": Feedback.CORRECT if is_correct else Feedback.WRONG,
            "submitted_answer": answer,
        }
    )
    return InProgress(session=session, question=question), pool


def advance(state: SessionState, pool: WordPool, engine: SessionEngine) -> SessionState:
    if not isinstance(state, InProgress) or not state.question.answered:
        return state

    session = state.session.model_copy(update={"solved_count": state.session.solved_count + 1})
    if session.solved_count >= session.limit:
        return finish(session)

    prepared = engine.next_question(session, pool)
    if prepared is None:
        logger.info("Word pool exhausted before the session limit")
        return finish(session)

    session, question = prepared
    return InProgress(session=session, question=question)


def finish(session: Session) -> Finished:
    logger.info(
        f"Session finished: {session.correct_count}/{session.solved_count} correct "
        f"({session.score_percentage}%)"
    )
    return Finished(session=session)


def return_to_lobby(state: SessionState) -> SessionState:
    if isinstance(state, Finished):
        return Lobby()
    return state
