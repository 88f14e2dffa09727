"""Service layer for exam results."""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession

from api.models.db.result import ExamResultRecord
from api.models.results import ResultCreate
from models import PASS_THRESHOLD, ExamResult, SubmitOutcome
from scoring import rounded_mean, rounded_ratio
from serialization import serialize_result

logger = logging.getLogger(__name__)


def new_result_id() -> str:
    """Server-assigned result identifier."""
    return f"result_{uuid.uuid4().hex}"


def save_result(db: DbSession, data: ResultCreate) -> ExamResultRecord:
    """Persist a completed result and assign its id and timestamp."""
    record = ExamResultRecord(
        id=new_result_id(),
        test_name=data.testName,
        test_type=data.testType,
        score=data.score,
        date=data.date,
        time_taken=data.timeTaken,
        total_questions=data.totalQuestions,
        correct_answers=data.correctAnswers,
        user_id=data.userId or "",
        user_name=data.userName,
        user_email=data.userEmail,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Result saved: %s - %s - %s%%", record.user_name, record.test_name, record.score
    )
    return record


def get_result(db: DbSession, result_id: str) -> ExamResultRecord | None:
    """Get a result by id."""
    return db.get(ExamResultRecord, result_id)


def list_results(db: DbSession, user_id: str | None = None) -> list[ExamResultRecord]:
    """Results newest first, optionally for one user."""
    query = select(ExamResultRecord)
    if user_id is not None:
        query = query.where(ExamResultRecord.user_id == user_id)
    query = query.order_by(ExamResultRecord.timestamp.desc())
    return list(db.execute(query).scalars().all())


def delete_result(db: DbSession, result_id: str) -> bool:
    """Delete a result."""
    record = get_result(db, result_id)
    if record is None:
        return False
    db.delete(record)
    db.commit()
    return True


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def filter_by_period(
    records: Iterable[ExamResultRecord],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[ExamResultRecord]:
    """Keep results whose timestamp falls within [start, end]; naive times are UTC."""
    selected = []
    for record in records:
        stamp = _as_utc(record.timestamp)
        if start is not None and stamp < _as_utc(start):
            continue
        if end is not None and stamp > _as_utc(end):
            continue
        selected.append(record)
    return selected


def pass_rate(scores: list[int]) -> int:
    """Percentage of scores at or above the pass threshold."""
    if not scores:
        return 0
    passed = sum(1 for s in scores if s >= PASS_THRESHOLD)
    return rounded_ratio(passed, len(scores))


def compute_result_stats(records: Iterable[ExamResultRecord]) -> dict[str, int]:
    """Totals, unique students, average score and pass rate."""
    records = list(records)
    scores = [r.score for r in records]
    return {
        "totalTests": len(records),
        "uniqueStudents": len({r.user_id for r in records}),
        "averageScore": rounded_mean(scores),
        "passRate": pass_rate(scores),
    }


def summarize_user_results(records: list[ExamResultRecord]) -> dict[str, int]:
    """
    Performance summary for one student.
    ``records`` must be newest first, as returned by list_results.
    """
    scores = [r.score for r in records]
    return {
        "testsCompleted": len(records),
        "averageScore": rounded_mean(scores),
        "lastScore": scores[0] if scores else 0,
        "bestScore": max(scores) if scores else 0,
    }


class DatabaseResultSink:
    """Result sink writing completed attempts to the results table."""

    def __init__(self, session_factory: Callable[[], DbSession]):
        self.session_factory = session_factory

    def _submit(self, result: ExamResult) -> SubmitOutcome:
        db = self.session_factory()
        try:
            record = save_result(db, ResultCreate(**serialize_result(result)))
            return SubmitOutcome(success=True, result_id=record.id)
        finally:
            db.close()

    async def submit(self, result: ExamResult) -> SubmitOutcome:
        return await asyncio.to_thread(self._submit, result)
