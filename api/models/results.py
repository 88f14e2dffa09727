"""Result-related Pydantic models."""
from pydantic import BaseModel, Field


class ResultCreate(BaseModel):
    """Result posted by an exam client after a completed attempt."""

    testName: str = Field(..., min_length=1)
    testType: str | None = None
    score: int = Field(..., ge=0, le=100)
    date: str | None = None
    timeTaken: str | None = None
    totalQuestions: int = Field(0, ge=0)
    correctAnswers: int = Field(0, ge=0)
    userId: str | None = None
    userName: str = Field(..., min_length=1)
    userEmail: str | None = None


class ResultSavedResponse(BaseModel):
    """Response for a saved result."""

    success: bool = True
    resultId: str
    timestamp: str


class ResultStats(BaseModel):
    """Aggregate statistics over a list of results."""

    totalTests: int
    uniqueStudents: int
    averageScore: int
    passRate: int


class UserResultSummary(BaseModel):
    """Per-student performance summary."""

    testsCompleted: int
    averageScore: int
    lastScore: int
    bestScore: int


class CsvExportResponse(BaseModel):
    """Response for a CSV export written to the export store."""

    success: bool = True
    message: str
    url: str
    filename: str


class ExportFile(BaseModel):
    """A stored CSV export."""

    name: str
    size: int
    created: str
    url: str


class ResultOut(BaseModel):
    """Stored result as returned to clients."""

    id: str
    testName: str
    testType: str | None = None
    score: int
    date: str | None = None
    timeTaken: str | None = None
    totalQuestions: int
    correctAnswers: int
    userId: str
    userName: str
    userEmail: str | None = None
    timestamp: str | None = None


class UserResultsResponse(BaseModel):
    """One student's results with a summary."""

    success: bool = True
    results: list[ResultOut]
    summary: UserResultSummary


class AllResultsResponse(BaseModel):
    """Every result in a period with aggregate statistics."""

    success: bool = True
    results: list[ResultOut]
    count: int
    stats: ResultStats
