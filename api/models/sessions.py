"""Exam session Pydantic models."""
from typing import Literal

from pydantic import BaseModel, Field


class SessionStartRequest(BaseModel):
    """Start a timed attempt."""

    testType: Literal["chapter", "mock"]
    testId: str = Field(..., min_length=1, max_length=64)
    testName: str | None = None


class AnswerRequest(BaseModel):
    """Record the chosen option for one question."""

    questionId: str = Field(..., min_length=1)
    optionIndex: int = Field(..., ge=0, le=3)


class AdvanceRequest(BaseModel):
    """Move to the previous (-1) or next (+1) question."""

    direction: Literal[-1, 1]


class JumpRequest(BaseModel):
    """Move directly to a question by position."""

    index: int = Field(..., ge=0)


class SessionQuestion(BaseModel):
    """Question as shown during an attempt (no correct answer)."""

    id: str
    question: str
    options: list[str]
    domain: str | None = None
    difficulty: str | None = None


class SessionResult(BaseModel):
    """Scored outcome of a completed attempt."""

    testName: str
    testType: str
    score: int
    passed: bool
    date: str
    timeTaken: str
    totalQuestions: int
    correctAnswers: int
    userId: str
    userName: str
    userEmail: str
    resultId: str | None = None
    saved: bool | None = None


class SessionState(BaseModel):
    """Snapshot of a running or completed attempt."""

    sessionId: str
    testType: str
    testId: str
    testName: str
    status: str
    completionReason: str | None = None
    currentIndex: int
    remainingSeconds: int
    durationSeconds: int
    questions: list[SessionQuestion]
    answers: dict[str, int]
    result: SessionResult | None = None
