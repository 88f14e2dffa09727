"""Persisted exam result model."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base
from models import PASS_THRESHOLD


class ExamResultRecord(Base):
    """
    One scored attempt. User fields are copied verbatim from the submitter
    so results survive user deletion or email changes.
    """

    __tablename__ = "results"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    test_name: Mapped[str] = mapped_column(String(200), nullable=False)
    test_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    score: Mapped[int] = mapped_column(nullable=False)
    date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    time_taken: Mapped[str | None] = mapped_column(String(32), nullable=True)
    total_questions: Mapped[int] = mapped_column(default=0, nullable=False)
    correct_answers: Mapped[int] = mapped_column(default=0, nullable=False)

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
        nullable=False,
    )

    @property
    def passed(self) -> bool:
        return self.score >= PASS_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase, as produced by the exam client)."""
        timestamp = self.timestamp
        if timestamp is not None and timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "testName": self.test_name,
            "testType": self.test_type,
            "score": self.score,
            "date": self.date,
            "timeTaken": self.time_taken,
            "totalQuestions": self.total_questions,
            "correctAnswers": self.correct_answers,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "timestamp": timestamp.isoformat() if timestamp else None,
        }
