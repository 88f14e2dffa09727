"""Service layer for question banks."""
import asyncio
import logging
import random
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession

from api.config import CHAPTER_DURATION_SECONDS, MOCK_DURATION_SECONDS, MOCK_QUESTION_LIMIT
from api.models.db.question_bank import QuestionBank
from catalog import CHAPTERS, MOCK_EXAMS, make_test_ref
from models import Question, QuestionFetch, TestDefinition, TestType
from serialization import parse_question, serialize_question

logger = logging.getLogger(__name__)


def get_bank(db: DbSession, test_type: TestType, test_id: str) -> QuestionBank | None:
    """Get the stored question bank for a test."""
    return db.execute(
        select(QuestionBank).where(
            QuestionBank.test_type == test_type.value,
            QuestionBank.test_id == test_id,
        )
    ).scalar_one_or_none()


def save_bank(
    db: DbSession, test_type: TestType, test_id: str, questions: list[Question]
) -> QuestionBank:
    """Store a validated question set, replacing any previous upload."""
    bank = get_bank(db, test_type, test_id)
    if bank is None:
        bank = QuestionBank(test_type=test_type.value, test_id=test_id)
        db.add(bank)
    bank.questions = [serialize_question(q) for q in questions]
    db.commit()
    db.refresh(bank)
    logger.info(
        "%d questions uploaded for %s %s", bank.question_count, test_type.value, test_id
    )
    return bank


def list_banks(db: DbSession) -> list[QuestionBank]:
    """All stored question banks."""
    return list(
        db.execute(
            select(QuestionBank).order_by(QuestionBank.test_type, QuestionBank.test_id)
        ).scalars().all()
    )


def load_questions(bank: QuestionBank) -> list[Question]:
    """Stored rows were validated on upload; anything unreadable is skipped."""
    questions = []
    for index, raw in enumerate(bank.questions):
        try:
            questions.append(parse_question(raw, index))
        except ValueError:
            logger.warning("Skipping unreadable question %d in %s", index, bank.key)
    return questions


def load_definition(bank: QuestionBank) -> TestDefinition:
    """Immutable question set for a stored bank."""
    test_type = TestType(bank.test_type)
    return TestDefinition(
        ref=make_test_ref(test_type, bank.test_id),
        questions=tuple(load_questions(bank)),
    )


def draw_questions(
    questions: list[Question],
    test_type: TestType,
    rng: random.Random | None = None,
) -> list[Question]:
    """Shuffle a question set; mock exams are cut down to the mock limit."""
    drawn = list(questions)
    (rng or random).shuffle(drawn)
    if test_type is TestType.MOCK:
        drawn = drawn[:MOCK_QUESTION_LIMIT]
    return drawn


def fetch_questions(
    db: DbSession,
    test_type: TestType,
    test_id: str,
    rng: random.Random | None = None,
) -> QuestionFetch:
    """Question set for one attempt, in the order it will be served."""
    bank = get_bank(db, test_type, test_id)
    if bank is None:
        return QuestionFetch(success=False)
    questions = draw_questions(list(load_definition(bank).questions), test_type, rng)
    return QuestionFetch(success=bool(questions), questions=questions, count=len(questions))


def catalog_entries(db: DbSession) -> list[dict[str, Any]]:
    """Chapter tests and mock exams with their uploaded question counts."""
    counts = {(bank.test_type, bank.test_id): bank.question_count for bank in list_banks(db)}
    entries = []
    for entry in (*CHAPTERS, *MOCK_EXAMS):
        count = counts.get((entry.test_type.value, entry.test_id), 0)
        if entry.test_type is TestType.MOCK:
            count = min(count, MOCK_QUESTION_LIMIT)
        entries.append(
            {
                "testType": entry.test_type.value,
                "testId": entry.test_id,
                "name": entry.name,
                "domain": entry.domain,
                "durationSeconds": (
                    MOCK_DURATION_SECONDS
                    if entry.test_type is TestType.MOCK
                    else CHAPTER_DURATION_SECONDS
                ),
                "questionCount": count,
                "available": count > 0,
            }
        )
    return entries


class DatabaseQuestionProvider:
    """Question provider backed by the question_banks table."""

    def __init__(self, session_factory: Callable[[], DbSession]):
        self.session_factory = session_factory

    def _fetch(self, test_type: TestType, test_id: str) -> QuestionFetch:
        db = self.session_factory()
        try:
            return fetch_questions(db, test_type, test_id)
        finally:
            db.close()

    async def fetch(self, test_type: TestType, test_id: str) -> QuestionFetch:
        return await asyncio.to_thread(self._fetch, test_type, test_id)
