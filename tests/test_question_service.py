import random

import models
from api.services import question_service


def make_questions(count):
    return [
        models.Question(id=str(i), question=f"Q{i}", options=("a", "b", "c", "d"), correct_answer=0)
        for i in range(count)
    ]


def test_draw_questions_shuffles_without_losing_any() -> None:
    questions = make_questions(20)
    drawn = question_service.draw_questions(questions, models.TestType.CHAPTER, random.Random(4))
    assert sorted(q.id for q in drawn) == sorted(q.id for q in questions)
    assert [q.id for q in questions] == [str(i) for i in range(20)]


def test_mock_draw_is_capped() -> None:
    drawn = question_service.draw_questions(make_questions(100), models.TestType.MOCK, random.Random(1))
    assert len(drawn) == 75
    assert len({q.id for q in drawn}) == 75


def test_chapter_draw_is_not_capped() -> None:
    drawn = question_service.draw_questions(make_questions(100), models.TestType.CHAPTER)
    assert len(drawn) == 100
