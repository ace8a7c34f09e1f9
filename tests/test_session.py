"""
Tests for the session lifecycle: Lobby -> InProgress -> Finished -> Lobby.
Run: python -m pytest tests/test_session.py -v
"""

from vocabtrainer.engine import score_answer
from vocabtrainer.models import (
    Direction,
    Feedback,
    Finished,
    InProgress,
    Lobby,
    QuizConfig,
    Session,
    SessionType,
    WordRange,
)
from vocabtrainer.session import advance, return_to_lobby, start_session, submit_answer
from vocabtrainer.vocabulary import apply_answer_result


def config(start=1, end=100, limit=10, direction=Direction.PROMPT_TO_TARGET):
    return QuizConfig(direction=direction, word_range=WordRange(start=start, end=end), limit=limit)


def wrong_option(question):
    return next(o for o in question.options if o != question.correct_answer)


class TestStartSession:
    def test_starts_with_first_question(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)

        assert isinstance(state, InProgress)
        assert state.session.solved_count == 0
        assert state.session.used_ids == (state.question.word_id,)
        assert state.question.feedback == Feedback.UNANSWERED

    def test_empty_range_stays_in_lobby(self, pool, engine):
        state = start_session(Lobby(), pool, config(start=50, end=60), SessionType.NORMAL, engine)
        assert isinstance(state, Lobby)

    def test_ignored_while_in_progress(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        assert start_session(state, pool, config(), SessionType.TRAINING, engine) is state

    def test_restart_from_finished_resets_counters(self, pool, engine):
        state = start_session(Lobby(), pool, config(limit=1), SessionType.NORMAL, engine)
        state, pool = submit_answer(state, pool, state.question.correct_answer)
        state = advance(state, pool, engine)
        assert isinstance(state, Finished)

        state = start_session(state, pool, config(limit=1), SessionType.NORMAL, engine)
        assert isinstance(state, InProgress)
        assert state.session.correct_count == 0
        assert len(state.session.used_ids) == 1

    def test_session_uses_configured_direction(self, pool, engine):
        state = start_session(
            Lobby(), pool, config(direction=Direction.TARGET_TO_PROMPT), SessionType.NORMAL, engine
        )
        word = pool.get(state.question.word_id)
        assert state.question.prompt_text == word.target
        assert state.question.correct_answer == word.prompt


class TestSubmitAnswer:
    def test_correct_answer(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        word_id = state.question.word_id

        state, new_pool = submit_answer(state, pool, state.question.correct_answer)

        assert state.question.feedback == Feedback.CORRECT
        assert state.session.correct_count == 1
        assert new_pool.get(word_id).correct_total == 1
        assert pool.get(word_id).correct_total == 0

    def test_wrong_answer(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        word_id = state.question.word_id
        answer = wrong_option(state.question)

        state, pool = submit_answer(state, pool, answer)

        assert state.question.feedback == Feedback.WRONG
        assert state.question.submitted_answer == answer
        assert state.session.correct_count == 0
        assert pool.get(word_id).wrong_count == 1

    def test_pool_holds_scored_word(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        question = state.question
        answer = wrong_option(question)
        _, expected = score_answer(pool.get(question.word_id), answer, question.correct_answer)

        _, new_pool = submit_answer(state, pool, answer)

        assert new_pool.get(question.word_id) == expected
        for old, new in zip(pool.words, new_pool.words):
            if old.id != question.word_id:
                assert new is old

    def test_second_submit_is_ignored(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        state, pool = submit_answer(state, pool, wrong_option(state.question))

        again_state, again_pool = submit_answer(state, pool, state.question.correct_answer)
        assert again_state is state
        assert again_pool is pool

    def test_ignored_in_lobby(self, pool):
        state = Lobby()
        assert submit_answer(state, pool, "犬") == (state, pool)


class TestAdvance:
    def test_requires_an_answer(self, pool, engine):
        state = start_session(Lobby(), pool, config(), SessionType.NORMAL, engine)
        assert advance(state, pool, engine) is state

    def test_ignored_when_finished(self, pool, engine):
        state = Finished(
            session=Session(
                mode=Direction.PROMPT_TO_TARGET,
                session_type=SessionType.NORMAL,
                limit=1,
                word_range=WordRange(),
                solved_count=1,
            )
        )
        assert advance(state, pool, engine) is state

    def test_normal_session_runs_to_limit_without_repeats(self, pool, engine):
        state = start_session(Lobby(), pool, config(limit=3), SessionType.NORMAL, engine)
        asked = []
        for _ in range(3):
            assert isinstance(state, InProgress)
            asked.append(state.question.word_id)
            state, pool = submit_answer(state, pool, state.question.correct_answer)
            state = advance(state, pool, engine)

        assert isinstance(state, Finished)
        assert state.session.solved_count == 3
        assert len(state.session.used_ids) == 3
        assert len(set(state.session.used_ids)) == 3
        assert list(state.session.used_ids) == asked

    def test_exhausted_pool_finishes_early(self, pool, engine):
        state = start_session(Lobby(), pool, config(start=1, end=2, limit=10), SessionType.NORMAL, engine)
        for _ in range(2):
            state, pool = submit_answer(state, pool, state.question.correct_answer)
            state = advance(state, pool, engine)

        assert isinstance(state, Finished)
        assert state.session.solved_count == 2
        assert set(state.session.used_ids) == {"1", "2"}

    def test_training_asks_most_missed_word_first(self, pool, engine):
        for _ in range(3):
            pool = apply_answer_result(pool, "4", is_correct=False)

        state = start_session(Lobby(), pool, config(), SessionType.TRAINING, engine)
        assert state.question.word_id == "4"

    def test_training_follows_updated_counters(self, pool, engine):
        pool = apply_answer_result(pool, "2", is_correct=False)
        pool = apply_answer_result(pool, "2", is_correct=False)
        pool = apply_answer_result(pool, "5", is_correct=False)

        state = start_session(Lobby(), pool, config(), SessionType.TRAINING, engine)
        assert state.question.word_id == "2"
        state, pool = submit_answer(state, pool, state.question.correct_answer)
        state = advance(state, pool, engine)
        assert state.question.word_id == "5"


class TestFinished:
    def test_accuracy_percentage(self):
        session = Session(
            mode=Direction.PROMPT_TO_TARGET,
            session_type=SessionType.NORMAL,
            limit=10,
            word_range=WordRange(),
            solved_count=10,
            correct_count=7,
        )
        assert session.accuracy == 0.7
        assert Finished(session=session).session.score_percentage == 70

    def test_half_percent_rounds_up(self):
        def percentage(correct, solved):
            return Session(
                mode=Direction.PROMPT_TO_TARGET,
                session_type=SessionType.NORMAL,
                limit=solved,
                word_range=WordRange(),
                solved_count=solved,
                correct_count=correct,
            ).score_percentage

        assert percentage(1, 8) == 13
        assert percentage(5, 8) == 63
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_accuracy_with_nothing_solved(self):
        session = Session(
            mode=Direction.PROMPT_TO_TARGET,
            session_type=SessionType.NORMAL,
            limit=10,
            word_range=WordRange(),
        )
        assert session.score_percentage == 0

    def test_mixed_answers_reported(self, pool, engine):
        state = start_session(Lobby(), pool, config(limit=4), SessionType.NORMAL, engine)
        for answer_correctly in (True, False, True, True):
            question = state.question
            answer = question.correct_answer if answer_correctly else wrong_option(question)
            state, pool = submit_answer(state, pool, answer)
            state = advance(state, pool, engine)

        assert state.session.correct_count == 3
        assert state.session.score_percentage == 75

    def test_back_to_lobby(self, pool, engine):
        state = start_session(Lobby(), pool, config(limit=1), SessionType.NORMAL, engine)
        assert return_to_lobby(state) is state

        state, pool = submit_answer(state, pool, state.question.correct_answer)
        state = advance(state, pool, engine)
        assert isinstance(return_to_lobby(state), Lobby)
