import asyncio
import logging

import pytest

import models
from session_controller import NoQuestionsAvailable, SessionController

USER = models.UserIdentity(id="u1", name="Jane", email="jane@example.com")


def make_questions(count: int, correct: int = 0) -> list[models.Question]:
    return [
        models.Question(
            id=f"q{i}",
            question=f"Question {i}",
            options=("a", "b", "c", "d"),
            correct_answer=correct,
        )
        for i in range(1, count + 1)
    ]


def make_ref(test_type=models.TestType.CHAPTER, test_id="1", name="Chapter 1") -> models.TestRef:
    return models.TestRef(test_type=test_type, test_id=test_id, name=name)


class FakeProvider:
    def __init__(self, questions=None, error=None):
        self.questions = questions or []
        self.error = error
        self.calls = []

    async def fetch(self, test_type, test_id):
        self.calls.append((test_type, test_id))
        if self.error is not None:
            raise self.error
        return models.QuestionFetch(
            success=bool(self.questions), questions=list(self.questions), count=len(self.questions)
        )


class FakeSink:
    def __init__(self, error=None, success=True):
        self.error = error
        self.success = success
        self.submitted = []

    async def submit(self, result):
        self.submitted.append(result)
        if self.error is not None:
            raise self.error
        return models.SubmitOutcome(success=self.success, result_id="result_1" if self.success else None)


def make_controller(questions, sink=None, **kwargs) -> tuple[SessionController, FakeSink]:
    sink = sink or FakeSink()
    kwargs.setdefault("tick_interval", None)
    controller = SessionController(
        FakeProvider(questions), sink, USER, today=lambda: "2024-05-01", **kwargs
    )
    return controller, sink


def test_manual_submit_scores_and_submits_once() -> None:
    async def scenario():
        controller, sink = make_controller(make_questions(4, correct=2))
        await controller.start(make_ref())
        for question_id in ("q1", "q2", "q3"):
            assert controller.record_answer(question_id, 2)
        controller.record_answer("q4", 0)

        result = controller.complete()
        outcome = await controller.wait_for_submission()
        return controller, sink, result, outcome

    controller, sink, result, outcome = asyncio.run(scenario())
    assert result.score == 75
    assert result.correct_answers == 3
    assert result.total_questions == 4
    assert result.passed
    assert result.date == "2024-05-01"
    assert result.user_id == "u1"
    assert result.test_type is models.TestType.CHAPTER
    assert sink.submitted == [result]
    assert outcome.result_id == "result_1"
    assert controller.session.completion_reason is models.CompletionReason.MANUAL_SUBMIT
    assert controller.submission_error is None


def test_timeout_completes_mock_exam_with_no_answers() -> None:
    async def scenario():
        controller, sink = make_controller(make_questions(75), durations={models.TestType.MOCK: 5})
        await controller.start(make_ref(models.TestType.MOCK, "1", "Mock Exam 1"))
        for _ in range(8):
            controller.tick()
        await controller.wait_for_submission()
        return controller, sink

    controller, sink = asyncio.run(scenario())
    assert controller.session.remaining_seconds == 0
    assert controller.session.completion_reason is models.CompletionReason.TIMEOUT
    assert controller.result.score == 0
    assert controller.result.correct_answers == 0
    assert controller.result.total_questions == 75
    assert controller.result.time_taken == "0:05"
    assert len(sink.submitted) == 1


def test_internal_timer_counts_down_to_timeout() -> None:
    async def scenario():
        controller, sink = make_controller(
            make_questions(3), tick_interval=0.01, durations={models.TestType.CHAPTER: 3}
        )
        await controller.start(make_ref())
        result = await asyncio.wait_for(controller.wait_for_completion(), timeout=5)
        await controller.wait_for_submission()
        return controller, sink, result

    controller, sink, result = asyncio.run(scenario())
    assert controller.session.completion_reason is models.CompletionReason.TIMEOUT
    assert result.total_questions == 3
    assert len(sink.submitted) == 1


def test_second_completion_is_a_no_op() -> None:
    async def scenario():
        controller, sink = make_controller(make_questions(2), durations={models.TestType.CHAPTER: 1})
        await controller.start(make_ref())
        first = controller.complete()
        second = controller.complete()
        controller.tick()
        await controller.wait_for_submission()
        return controller, sink, first, second

    controller, sink, first, second = asyncio.run(scenario())
    assert first is not None
    assert second is None
    assert controller.result is first
    assert controller.session.completion_reason is models.CompletionReason.MANUAL_SUBMIT
    assert len(sink.submitted) == 1


def test_elapsed_time_is_reported_as_minutes_and_seconds() -> None:
    async def scenario():
        controller, _ = make_controller(make_questions(1))
        await controller.start(make_ref())
        for _ in range(65):
            controller.tick()
        return controller.complete()

    result = asyncio.run(scenario())
    assert result.time_taken == "1:05"


def test_answers_are_validated_and_overwritable() -> None:
    async def scenario():
        controller, _ = make_controller(make_questions(2))
        await controller.start(make_ref())
        outcomes = [
            controller.record_answer("q1", 4),
            controller.record_answer("q1", -1),
            controller.record_answer("missing", 1),
            controller.record_answer("q1", 1),
            controller.record_answer("q1", 3),
        ]
        answers_before = dict(controller.session.answers)
        controller.complete()
        late = controller.record_answer("q2", 0)
        return outcomes, answers_before, late, dict(controller.session.answers)

    outcomes, answers_before, late, answers_after = asyncio.run(scenario())
    assert outcomes == [False, False, False, True, True]
    assert answers_before == {"q1": 3}
    assert late is False
    assert answers_after == {"q1": 3}


def test_navigation_is_clamped() -> None:
    async def scenario():
        controller, _ = make_controller(make_questions(3))
        await controller.start(make_ref())
        steps = [
            controller.advance(-1),
            controller.advance(1),
            controller.advance(1),
            controller.advance(1),
        ]
        jumps = [controller.jump_to(0), controller.jump_to(3), controller.jump_to(-1)]
        return steps, jumps, controller.session.current_index

    steps, jumps, index = asyncio.run(scenario())
    assert steps == [0, 1, 2, 2]
    assert jumps == [True, False, False]
    assert index == 0


def test_provider_failure_raises_no_questions() -> None:
    async def scenario():
        controller = SessionController(
            FakeProvider(error=RuntimeError("network down")), FakeSink(), USER, tick_interval=None
        )
        with pytest.raises(NoQuestionsAvailable):
            await controller.start(make_ref())
        return controller

    controller = asyncio.run(scenario())
    assert controller.status is models.SessionStatus.NOT_STARTED
    assert controller.result is None


def test_empty_question_set_raises_no_questions() -> None:
    async def scenario():
        controller, sink = make_controller([])
        with pytest.raises(NoQuestionsAvailable):
            await controller.start(make_ref())
        assert controller.complete() is None
        return sink

    sink = asyncio.run(scenario())
    assert sink.submitted == []


def test_sink_failure_is_logged_and_result_kept(caplog: pytest.LogCaptureFixture) -> None:
    async def scenario():
        controller, _ = make_controller(make_questions(2), sink=FakeSink(error=OSError("db offline")))
        await controller.start(make_ref())
        controller.record_answer("q1", 0)
        controller.complete()
        await controller.wait_for_submission()
        return controller

    with caplog.at_level(logging.ERROR, logger="session_controller"):
        controller = asyncio.run(scenario())
    assert controller.result.score == 50
    assert controller.submission.success is False
    assert "db offline" in str(controller.submission_error)
    assert any("Failed to save result" in record.message for record in caplog.records)


def test_rejected_submission_is_reported() -> None:
    async def scenario():
        controller, _ = make_controller(make_questions(1), sink=FakeSink(success=False))
        await controller.start(make_ref())
        controller.complete()
        await controller.wait_for_submission()
        return controller

    controller = asyncio.run(scenario())
    assert controller.submission_error is not None
    assert controller.result is not None


def test_abandon_emits_nothing() -> None:
    async def scenario():
        controller, sink = make_controller(make_questions(2), tick_interval=0.01)
        await controller.start(make_ref())
        controller.abandon()
        await asyncio.sleep(0.05)
        return controller, sink

    controller, sink = asyncio.run(scenario())
    assert controller.session is None
    assert controller.result is None
    assert sink.submitted == []


def test_configured_durations_override_defaults() -> None:
    controller = SessionController(
        FakeProvider(), FakeSink(), USER, durations={models.TestType.MOCK: 90}
    )
    assert controller.duration_for(models.TestType.MOCK) == 90
    assert controller.duration_for(models.TestType.CHAPTER) == 3600


def test_manual_submit_on_first_of_six_questions() -> None:
    async def scenario():
        controller, sink = make_controller(make_questions(6))
        await controller.start(make_ref())
        controller.record_answer("q1", 0)
        result = controller.complete()
        await controller.wait_for_submission()
        return controller, sink, result

    controller, sink, result = asyncio.run(scenario())
    assert controller.session.current_index == 0
    assert result.total_questions == 6
    assert result.correct_answers == 1
    assert result.score == 17
    assert not result.passed
    assert sink.submitted == [result]
