from __future__ import annotations

import csv
import io
from typing import Any, Iterable

from models import OPTION_COUNT, ExamResult, Question, TestType


CSV_HEADER = [
    "ID",
    "User Name",
    "User Email",
    "Test Name",
    "Test Type",
    "Score (%)",
    "Date",
    "Time Taken",
    "Total Questions",
    "Correct Answers",
    "User ID",
    "Timestamp",
]


class QuestionBankError(ValueError):
    """Raised when an uploaded question bank is malformed."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


def _question_id(raw: Any) -> str | None:
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, str)):
        cleaned = str(raw).strip()
        return cleaned or None
    return None


def parse_question(raw: Any, index: int) -> Question:
    if not isinstance(raw, dict):
        raise QuestionBankError(f"Invalid question format at index {index}", index)
    question_id = _question_id(raw.get("id"))
    text = raw.get("question")
    options = raw.get("options")
    correct = raw.get("correctAnswer")
    if (
        question_id is None
        or not isinstance(text, str)
        or not text.strip()
        or not isinstance(options, list)
        or len(options) != OPTION_COUNT
        or isinstance(correct, bool)
        or not isinstance(correct, int)
        or not 0 <= correct < OPTION_COUNT
    ):
        raise QuestionBankError(f"Invalid question format at index {index}", index)
    domain = raw.get("domain")
    difficulty = raw.get("difficulty")
    return Question(
        id=question_id,
        question=text,
        options=tuple(str(option) for option in options),
        correct_answer=correct,
        domain=str(domain) if domain is not None else None,
        difficulty=str(difficulty) if difficulty is not None else None,
    )


def parse_question_bank(data: Any, test_type: TestType) -> list[Question]:
    """
    Validate a decoded question bank upload and return its questions.
    Mock exams must carry at least the mock minimum.
    """
    if not isinstance(data, list):
        raise QuestionBankError("Questions must be an array")
    questions = [parse_question(item, index) for index, item in enumerate(data)]

    seen: set[str] = set()
    for index, question in enumerate(questions):
        if question.id in seen:
            raise QuestionBankError(
                f"Duplicate question id '{question.id}' at index {index}", index
            )
        seen.add(question.id)

    minimum = test_type.min_question_count
    if len(questions) < minimum:
        raise QuestionBankError(
            f"Mock exams must have at least {minimum} questions. "
            f"Uploaded: {len(questions)}"
        )
    return questions


def serialize_question(question: Question, include_answer: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": question.id,
        "question": question.question,
        "options": list(question.options),
    }
    if include_answer:
        payload["correctAnswer"] = question.correct_answer
    if question.domain is not None:
        payload["domain"] = question.domain
    if question.difficulty is not None:
        payload["difficulty"] = question.difficulty
    return payload


def serialize_result(result: ExamResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "testName": result.test_name,
        "testType": result.test_type.value,
        "score": result.score,
        "date": result.date,
        "timeTaken": result.time_taken,
        "totalQuestions": result.total_questions,
        "correctAnswers": result.correct_answers,
        "userId": result.user_id,
        "userName": result.user_name,
        "userEmail": result.user_email,
    }
    if result.result_id is not None:
        payload["id"] = result.result_id
    if result.timestamp is not None:
        payload["timestamp"] = result.timestamp
    return payload


def format_duration(seconds: int) -> str:
    """Format seconds as ``M:SS``; minutes keep counting past 59."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def results_to_csv(rows: Iterable[dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(
            [
                row.get("id"),
                row.get("userName"),
                row.get("userEmail") or "N/A",
                row.get("testName"),
                row.get("testType") or "N/A",
                row.get("score"),
                row.get("date"),
                row.get("timeTaken"),
                row.get("totalQuestions"),
                row.get("correctAnswers"),
                row.get("userId"),
                row.get("timestamp"),
            ]
        )
    return buffer.getvalue()
