"""
Question bank database model.
One row per (test type, test id); the questions are stored as a JSON array.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from api.database import Base


class QuestionBank(Base):
    """Uploaded question set for a chapter test or mock exam."""

    __tablename__ = "question_banks"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    test_type: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    test_id: Mapped[str] = mapped_column(String(64), nullable=False)
    question_count: Mapped[int] = mapped_column(default=0, nullable=False)
    questions_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("test_type", "test_id", name="uq_question_bank_test"),
    )

    @property
    def key(self) -> str:
        return f"{self.test_type}_{self.test_id}"

    @property
    def questions(self) -> list[dict[str, Any]]:
        """Parse questions from JSON."""
        try:
            data = json.loads(self.questions_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return data if isinstance(data, list) else []

    @questions.setter
    def questions(self, value: list[dict[str, Any]]) -> None:
        """Serialize questions to JSON."""
        self.questions_json = json.dumps(value, ensure_ascii=False)
        self.question_count = len(value)
