from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from models import PASS_THRESHOLD, Question


@dataclass(frozen=True)
class ScoreSummary:
    percentage: int
    correct_count: int
    total: int

    @property
    def passed(self) -> bool:
        return self.percentage >= PASS_THRESHOLD


def rounded_ratio(numerator: int, denominator: int, scale: int = 100) -> int:
    """
    Integer ``round(numerator / denominator * scale)`` with halves rounded up.
    Avoids float drift and Python's round-half-even.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * scale * numerator + denominator) // (2 * denominator)


def rounded_mean(values: Iterable[int]) -> int:
    items = list(values)
    if not items:
        return 0
    return rounded_ratio(sum(items), len(items), scale=1)


def score(questions: Sequence[Question], answers: Mapping[str, int]) -> ScoreSummary:
    """
    Score an attempt. Unanswered questions count as incorrect.
    An empty question list is a caller error.
    """
    if not questions:
        raise ValueError("cannot score an empty question set")
    correct = sum(1 for q in questions if answers.get(q.id) == q.correct_answer)
    return ScoreSummary(
        percentage=rounded_ratio(correct, len(questions)),
        correct_count=correct,
        total=len(questions),
    )
