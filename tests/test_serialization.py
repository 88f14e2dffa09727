import csv
import io

import pytest

import models
import serialization


def raw_question(question_id=1, correct=0, **overrides):
    payload = {
        "id": question_id,
        "question": "Which metric tracks churn?",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": correct,
    }
    payload.update(overrides)
    return payload


def test_parse_question_accepts_int_and_string_ids() -> None:
    numeric = serialization.parse_question(raw_question(7, domain="Domain 1"), 0)
    text = serialization.parse_question(raw_question("q-7"), 1)
    assert numeric.id == "7"
    assert numeric.domain == "Domain 1"
    assert numeric.options == ("A", "B", "C", "D")
    assert text.id == "q-7"


@pytest.mark.parametrize(
    "overrides",
    [
        {"options": ["A", "B", "C"]},
        {"correctAnswer": 4},
        {"correctAnswer": -1},
        {"correctAnswer": "1"},
        {"correctAnswer": True},
        {"question": "   "},
        {"id": None},
        {"id": True},
    ],
)
def test_parse_question_rejects_malformed_rows(overrides) -> None:
    with pytest.raises(serialization.QuestionBankError) as excinfo:
        serialization.parse_question(raw_question(**overrides), 3)
    assert excinfo.value.index == 3
    assert "index 3" in str(excinfo.value)


def test_parse_question_bank_requires_array() -> None:
    with pytest.raises(serialization.QuestionBankError, match="array"):
        serialization.parse_question_bank({"questions": []}, models.TestType.CHAPTER)


def test_parse_question_bank_rejects_duplicate_ids() -> None:
    with pytest.raises(serialization.QuestionBankError, match="Duplicate"):
        serialization.parse_question_bank(
            [raw_question(1), raw_question("1")], models.TestType.CHAPTER
        )


def test_mock_bank_needs_minimum_questions() -> None:
    bank = [raw_question(i) for i in range(74)]
    with pytest.raises(serialization.QuestionBankError) as excinfo:
        serialization.parse_question_bank(bank, models.TestType.MOCK)
    assert str(excinfo.value) == "Mock exams must have at least 75 questions. Uploaded: 74"

    bank.append(raw_question(74))
    assert len(serialization.parse_question_bank(bank, models.TestType.MOCK)) == 75


def test_chapter_bank_has_no_minimum() -> None:
    questions = serialization.parse_question_bank([raw_question(1)], models.TestType.CHAPTER)
    assert [q.id for q in questions] == ["1"]


def test_serialize_question_can_hide_answer() -> None:
    question = serialization.parse_question(raw_question(5, correct=2), 0)
    assert serialization.serialize_question(question)["correctAnswer"] == 2
    assert "correctAnswer" not in serialization.serialize_question(question, include_answer=False)


def test_serialize_result_uses_wire_names() -> None:
    result = models.ExamResult(
        test_name="Mock Exam 1",
        test_type=models.TestType.MOCK,
        score=72,
        date="2024-05-01",
        time_taken="95:03",
        total_questions=75,
        correct_answers=54,
        user_id="7",
        user_name="Jane",
        user_email="jane@example.com",
    )
    payload = serialization.serialize_result(result)
    assert payload["testType"] == "mock"
    assert payload["timeTaken"] == "95:03"
    assert payload["correctAnswers"] == 54
    assert "id" not in payload
    assert "timestamp" not in payload


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0:00"), (5, "0:05"), (65, "1:05"), (3600, "60:00"), (-3, "0:00")],
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert serialization.format_duration(seconds) == expected


def test_results_to_csv_fills_missing_fields() -> None:
    text = serialization.results_to_csv(
        [
            {
                "id": "result_1",
                "userName": "Jane, Doe",
                "userEmail": None,
                "testName": "Chapter 1",
                "testType": None,
                "score": 80,
                "date": "2024-05-01",
                "timeTaken": "10:00",
                "totalQuestions": 10,
                "correctAnswers": 8,
                "userId": "7",
                "timestamp": "2024-05-01T10:00:00+00:00",
            }
        ]
    )
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == serialization.CSV_HEADER
    assert rows[1][1] == "Jane, Doe"
    assert rows[1][2] == "N/A"
    assert rows[1][4] == "N/A"
    assert rows[1][5] == "80"
