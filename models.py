from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List

OPTION_COUNT = 4
MOCK_MIN_QUESTIONS = 75
PASS_THRESHOLD = 70


class TestType(str, enum.Enum):
    CHAPTER = "chapter"
    MOCK = "mock"

    @property
    def default_duration_seconds(self) -> int:
        return 7200 if self is TestType.MOCK else 3600

    @property
    def min_question_count(self) -> int:
        return MOCK_MIN_QUESTIONS if self is TestType.MOCK else 0


class SessionStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CompletionReason(str, enum.Enum):
    MANUAL_SUBMIT = "manual_submit"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Question:
    id: str
    question: str
    options: tuple[str, ...]
    correct_answer: int
    domain: str | None = None
    difficulty: str | None = None


@dataclass(frozen=True)
class TestRef:
    test_type: TestType
    test_id: str
    name: str


@dataclass(frozen=True)
class TestDefinition:
    ref: TestRef
    questions: tuple[Question, ...]

    @property
    def min_question_count(self) -> int:
        return self.ref.test_type.min_question_count


@dataclass(frozen=True)
class UserIdentity:
    id: str
    name: str
    email: str


@dataclass(frozen=True)
class QuestionFetch:
    success: bool
    questions: List[Question] = field(default_factory=list)
    count: int = 0


@dataclass(frozen=True)
class SubmitOutcome:
    success: bool
    result_id: str | None = None


@dataclass(frozen=True)
class ExamResult:
    test_name: str
    test_type: TestType
    score: int
    date: str
    time_taken: str
    total_questions: int
    correct_answers: int
    user_id: str
    user_name: str
    user_email: str
    result_id: str | None = None
    timestamp: str | None = None

    @property
    def passed(self) -> bool:
        return self.score >= PASS_THRESHOLD


@dataclass
class ExamSession:
    test: TestRef
    duration_seconds: int
    questions: List[Question] = field(default_factory=list)
    answers: Dict[str, int] = field(default_factory=dict)
    current_index: int = 0
    remaining_seconds: int = 0
    status: SessionStatus = SessionStatus.NOT_STARTED
    completion_reason: CompletionReason | None = None

    @property
    def elapsed_seconds(self) -> int:
        return self.duration_seconds - self.remaining_seconds

    def has_question(self, question_id: str) -> bool:
        return any(q.id == question_id for q in self.questions)
