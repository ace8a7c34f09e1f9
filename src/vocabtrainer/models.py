import math
from enum import Enum
from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    PROMPT_TO_TARGET = "prompt_to_target"
    TARGET_TO_PROMPT = "target_to_prompt"


class SessionType(str, Enum):
    NORMAL = "normal"
    TRAINING = "training"


class Feedback(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    WRONG = "wrong"


# --- Vocabulary ---
class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str
    target: str
    wrong_count: int = Field(default=0, ge=0)
    correct_total: int = Field(default=0, ge=0)

    @property
    def in_training(self) -> bool:
        return self.wrong_count > 0

    def question_text(self, mode: Direction) -> str:
        return self.prompt if mode == Direction.PROMPT_TO_TARGET else self.target

    def answer_text(self, mode: Direction) -> str:
        return self.target if mode == Direction.PROMPT_TO_TARGET else self.prompt


class WordPool(BaseModel):
    """Ordered, immutable collection of words. Updates return a new pool."""

    model_config = ConfigDict(frozen=True)

    words: Tuple[Word, ...] = ()

    def get(self, word_id: str) -> Optional[Word]:
        for word in self.words:
            if word.id == word_id:
                return word
        return None


class ProgressRecord(BaseModel):
    """Persisted counters of one word, keyed by word id."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    wrong_count: int = Field(default=0, ge=0, alias="wrongCount")
    correct_total: int = Field(default=0, ge=0, alias="correctTotal")


# --- Configuration ---
class WordRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = 1
    end: int = 100


class QuizConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: Direction = Direction.PROMPT_TO_TARGET
    word_range: WordRange = WordRange()
    limit: int = Field(default=10, ge=1)


# --- Session ---
class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_id: str
    prompt_text: str
    correct_answer: str
    options: Tuple[str, ...]
    feedback: Feedback = Feedback.UNANSWERED
    submitted_answer: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.feedback != Feedback.UNANSWERED


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Direction
    session_type: SessionType
    limit: int
    word_range: WordRange
    solved_count: int = 0
    correct_count: int = 0
    used_ids: Tuple[str, ...] = ()

    @property
    def accuracy(self) -> float:
        return self.correct_count / max(self.solved_count, 1)

    @property
    def score_percentage(self) -> int:
        # Halves round up
        return math.floor(self.accuracy * 100 + 0.5)


class Lobby(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["lobby"] = "lobby"


class InProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["in_progress"] = "in_progress"
    session: Session
    question: Question


class Finished(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["finished"] = "finished"
    session: Session


SessionState = Union[Lobby, InProgress, Finished]


# --- API payloads ---
class StartRequest(BaseModel):
    session_type: SessionType = SessionType.NORMAL


class AnswerRequest(BaseModel):
    answer: str


class ConfigUpdate(BaseModel):
    direction: Optional[Direction] = None
    word_range: Optional[WordRange] = None
    limit: Optional[int] = Field(default=None, ge=1)


class QuestionView(BaseModel):
    prompt_text: str
    options: Tuple[str, ...]
    feedback: Feedback
    submitted_answer: Optional[str] = None
    correct_answer: Optional[str] = None


class TrainerView(BaseModel):
    phase: str
    session_type: Optional[SessionType] = None
    solved_count: int = 0
    correct_count: int = 0
    limit: int
    question: Optional[QuestionView] = None
    score_percentage: Optional[int] = None
    mastery_count: int
    training_count: int
    config: QuizConfig
