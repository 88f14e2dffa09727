"""Question bank Pydantic models."""
from pydantic import BaseModel, Field


class QuestionOut(BaseModel):
    """A question as served to an exam client."""

    id: str
    question: str
    options: list[str] = Field(..., min_length=4, max_length=4)
    correctAnswer: int = Field(..., ge=0, le=3)
    domain: str | None = None
    difficulty: str | None = None


class QuestionSetResponse(BaseModel):
    """Question set for one attempt."""

    success: bool = True
    questions: list[QuestionOut]
    count: int


class QuestionUploadResponse(BaseModel):
    """Result of a question bank upload."""

    success: bool = True
    message: str
    count: int
    testType: str
    testId: str


class AvailableTest(BaseModel):
    """Stored question bank summary."""

    testType: str
    testId: str
    questionCount: int
    filename: str


class CatalogTest(BaseModel):
    """Catalog entry annotated with its uploaded question count."""

    testType: str
    testId: str
    name: str
    domain: str | None = None
    durationSeconds: int
    questionCount: int
    available: bool
