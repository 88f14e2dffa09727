"""
Server-hosted exam sessions.

Each attempt gets its own SessionController living on the server's event
loop, so the countdown keeps running between requests and a timed-out
attempt is scored and saved even if the client never calls submit.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException

from api.config import (
    CHAPTER_DURATION_SECONDS,
    COMPLETED_SESSION_RETENTION_SECONDS,
    MOCK_DURATION_SECONDS,
)
from api.database import SessionLocal
from api.models.db.user import User
from api.services.question_service import DatabaseQuestionProvider
from api.services.result_service import DatabaseResultSink
from models import TestRef, TestType, UserIdentity
from serialization import serialize_result
from session_controller import QuestionProvider, ResultSink, SessionController

logger = logging.getLogger(__name__)


def identity_for(user: User) -> UserIdentity:
    """Identity attached to results submitted on behalf of a user."""
    return UserIdentity(id=str(user.id), name=user.name, email=user.email)


class ExamSessionRegistry:
    """Live controllers keyed by session id, each owned by one user."""

    def __init__(
        self,
        provider: QuestionProvider,
        sink: ResultSink,
        durations: dict[TestType, int] | None = None,
        tick_interval: float | None = 1.0,
        retention_seconds: int = COMPLETED_SESSION_RETENTION_SECONDS,
    ):
        self.provider = provider
        self.sink = sink
        self.durations = durations
        self.tick_interval = tick_interval
        self.retention_seconds = retention_seconds
        self._controllers: dict[str, SessionController] = {}
        self._owners: dict[str, int] = {}

    async def start(self, user: User, test: TestRef) -> tuple[str, SessionController]:
        """
        Start a new attempt for a user.

        Raises:
            NoQuestionsAvailable: propagated from the controller.
        """
        self.purge_completed()
        controller = SessionController(
            self.provider,
            self.sink,
            identity_for(user),
            durations=self.durations,
            tick_interval=self.tick_interval,
        )
        await controller.start(test)
        session_id = uuid.uuid4().hex
        self._controllers[session_id] = controller
        self._owners[session_id] = user.id
        return session_id, controller

    def get(self, session_id: str, user: User) -> SessionController:
        """Controller for a session owned by user; 404 otherwise."""
        controller = self._controllers.get(session_id)
        if controller is None or self._owners.get(session_id) != user.id:
            raise HTTPException(status_code=404, detail="Session not found")
        return controller

    def discard(self, session_id: str, user: User) -> None:
        """Abandon (if still running) and forget a session."""
        controller = self.get(session_id, user)
        controller.abandon()
        del self._controllers[session_id]
        del self._owners[session_id]

    def purge_completed(self, now: datetime | None = None) -> int:
        """Forget completed sessions older than the retention window."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=self.retention_seconds)
        stale = [
            session_id
            for session_id, controller in self._controllers.items()
            if controller.completed_at is not None and controller.completed_at < cutoff
        ]
        for session_id in stale:
            del self._controllers[session_id]
            del self._owners[session_id]
        if stale:
            logger.info("Purged %d completed exam sessions", len(stale))
        return len(stale)

    def abandon_all(self) -> None:
        """Stop every running timer (application shutdown)."""
        for controller in self._controllers.values():
            controller.abandon()
        self._controllers.clear()
        self._owners.clear()

    def __len__(self) -> int:
        return len(self._controllers)


def session_state(session_id: str, controller: SessionController) -> dict[str, object]:
    """Wire snapshot of an attempt; correct answers are never included."""
    session = controller.session
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    result = None
    if controller.result is not None:
        result = {
            **serialize_result(controller.result),
            "passed": controller.result.passed,
            "resultId": controller.submission.result_id if controller.submission else None,
            "saved": controller.submission.success if controller.submission else None,
        }
    return {
        "sessionId": session_id,
        "testType": session.test.test_type.value,
        "testId": session.test.test_id,
        "testName": session.test.name,
        "status": session.status.value,
        "completionReason": (
            session.completion_reason.value if session.completion_reason else None
        ),
        "currentIndex": session.current_index,
        "remainingSeconds": session.remaining_seconds,
        "durationSeconds": session.duration_seconds,
        "questions": [
            {
                "id": q.id,
                "question": q.question,
                "options": list(q.options),
                "domain": q.domain,
                "difficulty": q.difficulty,
            }
            for q in session.questions
        ],
        "answers": dict(session.answers),
        "result": result,
    }


exam_sessions = ExamSessionRegistry(
    DatabaseQuestionProvider(SessionLocal),
    DatabaseResultSink(SessionLocal),
    durations={
        TestType.MOCK: MOCK_DURATION_SECONDS,
        TestType.CHAPTER: CHAPTER_DURATION_SECONDS,
    },
)


def get_session_registry() -> ExamSessionRegistry:
    """FastAPI dependency for the process-wide session registry."""
    return exam_sessions
