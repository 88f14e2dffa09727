import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

import models
from api.services.session_service import ExamSessionRegistry, session_state

JANE = SimpleNamespace(id=1, name="Jane", email="jane@example.com")
BOB = SimpleNamespace(id=2, name="Bob", email="bob@example.com")
REF = models.TestRef(test_type=models.TestType.CHAPTER, test_id="1", name="Chapter 1")


class FakeProvider:
    async def fetch(self, test_type, test_id):
        questions = [
            models.Question(id="1", question="Q1", options=("a", "b", "c", "d"), correct_answer=0)
        ]
        return models.QuestionFetch(success=True, questions=questions, count=1)


class FakeSink:
    async def submit(self, result):
        return models.SubmitOutcome(success=True, result_id="result_1")


def make_registry(**kwargs) -> ExamSessionRegistry:
    return ExamSessionRegistry(FakeProvider(), FakeSink(), tick_interval=None, **kwargs)


def test_sessions_belong_to_their_owner() -> None:
    registry = make_registry()

    async def scenario():
        session_id, controller = await registry.start(JANE, REF)
        assert registry.get(session_id, JANE) is controller
        with pytest.raises(HTTPException) as excinfo:
            registry.get(session_id, BOB)
        assert excinfo.value.status_code == 404
        with pytest.raises(HTTPException):
            registry.discard(session_id, BOB)
        return session_id, controller

    session_id, controller = asyncio.run(scenario())
    assert controller.user.id == "1"
    assert len(registry) == 1


def test_state_hides_answers_until_completion() -> None:
    registry = make_registry()

    async def scenario():
        session_id, controller = await registry.start(JANE, REF)
        before = session_state(session_id, controller)
        controller.record_answer("1", 0)
        controller.complete()
        await controller.wait_for_submission()
        return before, session_state(session_id, controller)

    before, after = asyncio.run(scenario())
    assert before["result"] is None
    assert "correctAnswer" not in before["questions"][0]
    assert after["status"] == "completed"
    assert after["result"]["score"] == 100
    assert after["result"]["passed"] is True
    assert after["result"]["resultId"] == "result_1"
    assert after["result"]["saved"] is True


def test_purge_completed_respects_retention() -> None:
    registry = make_registry(retention_seconds=60)

    async def scenario():
        done_id, done = await registry.start(JANE, REF)
        done.complete()
        await done.wait_for_submission()
        running_id, _ = await registry.start(BOB, REF)
        return done_id, running_id, done.completed_at

    done_id, running_id, completed_at = asyncio.run(scenario())
    assert registry.purge_completed(now=completed_at + timedelta(seconds=30)) == 0
    assert registry.purge_completed(now=completed_at + timedelta(seconds=61)) == 1
    assert len(registry) == 1
    with pytest.raises(HTTPException):
        registry.get(done_id, JANE)
    assert registry.get(running_id, BOB) is not None


def test_discard_and_abandon_all() -> None:
    registry = make_registry()

    async def scenario():
        first, _ = await registry.start(JANE, REF)
        await registry.start(BOB, REF)
        registry.discard(first, JANE)
        assert len(registry) == 1
        registry.abandon_all()

    asyncio.run(scenario())
    assert len(registry) == 0
    assert registry.purge_completed(now=datetime.now(timezone.utc)) == 0
