"""
Timed exam session lifecycle.

One controller drives one attempt: it loads the question set, runs the
countdown, records answers, and emits exactly one result whether the
attempt ends by manual submit or by timeout. Everything runs on a single
event loop; the completion guard is checked synchronously so a timer tick
and a submit click landing in the same loop iteration cannot both emit.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Mapping, Protocol

from models import (
    OPTION_COUNT,
    CompletionReason,
    ExamResult,
    ExamSession,
    QuestionFetch,
    SessionStatus,
    SubmitOutcome,
    TestRef,
    TestType,
    UserIdentity,
)
from scoring import score
from serialization import format_duration

log = logging.getLogger(__name__)


class NoQuestionsAvailable(Exception):
    """The question bank returned no questions for the requested test."""


class SubmissionFailed(Exception):
    """The result sink did not persist a completed result."""


class QuestionProvider(Protocol):
    async def fetch(self, test_type: TestType, test_id: str) -> QuestionFetch:
        ...


class ResultSink(Protocol):
    async def submit(self, result: ExamResult) -> SubmitOutcome:
        ...


def _utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class SessionController:
    def __init__(
        self,
        provider: QuestionProvider,
        sink: ResultSink,
        user: UserIdentity,
        durations: Mapping[TestType, int] | None = None,
        tick_interval: float | None = 1.0,
        today: Callable[[], str] = _utc_today,
    ):
        self.provider = provider
        self.sink = sink
        self.user = user
        self.durations = dict(durations or {})
        # None disables the internal timer; the caller drives tick() itself.
        self.tick_interval = tick_interval
        self._today = today

        self.session: ExamSession | None = None
        self.result: ExamResult | None = None
        self.submission: SubmitOutcome | None = None
        self.submission_error: SubmissionFailed | None = None
        self.completed_at: datetime | None = None

        self._completed = asyncio.Event()
        self._timer: asyncio.Task | None = None
        self._submit_task: asyncio.Task | None = None

    @property
    def status(self) -> SessionStatus:
        if self.session is None:
            return SessionStatus.NOT_STARTED
        return self.session.status

    @property
    def is_completed(self) -> bool:
        return self.status is SessionStatus.COMPLETED

    def duration_for(self, test_type: TestType) -> int:
        return self.durations.get(test_type, test_type.default_duration_seconds)

    async def start(self, test: TestRef) -> ExamSession:
        """
        Load the question set and start the countdown.

        Raises:
            NoQuestionsAvailable: the provider failed, raised, or returned
                an empty set. The session stays NOT_STARTED.
        """
        if self.session is not None and self.session.status is not SessionStatus.NOT_STARTED:
            raise RuntimeError("session already started")

        session = ExamSession(
            test=test, duration_seconds=self.duration_for(test.test_type)
        )
        self.session = session

        try:
            fetched = await self.provider.fetch(test.test_type, test.test_id)
        except Exception as exc:
            log.warning(
                "Failed to load questions for %s %s: %s",
                test.test_type.value,
                test.test_id,
                exc,
            )
            raise NoQuestionsAvailable("Error loading test. Please try again.") from exc

        if self.session is not session:
            raise RuntimeError("session was abandoned while loading")
        if not fetched.success or not fetched.questions:
            log.info(
                "No questions available for %s %s",
                test.test_type.value,
                test.test_id,
            )
            raise NoQuestionsAvailable(
                "No questions available for this test. "
                "Please contact the administrator."
            )

        session.questions = list(fetched.questions)
        session.answers = {}
        session.current_index = 0
        session.remaining_seconds = session.duration_seconds
        session.status = SessionStatus.IN_PROGRESS

        if self.tick_interval is not None:
            self._timer = asyncio.get_running_loop().create_task(
                self._run_timer(session), name=f"exam-timer-{test.test_id}"
            )
        log.info(
            "Started %s test %s for user %s: %d questions, %ds",
            test.test_type.value,
            test.test_id,
            self.user.id,
            len(session.questions),
            session.duration_seconds,
        )
        return session

    def _active(self) -> ExamSession | None:
        session = self.session
        if session is None or session.status is not SessionStatus.IN_PROGRESS:
            return None
        return session

    def record_answer(self, question_id: str, option_index: int) -> bool:
        """Record (or overwrite) an answer. Returns False when ignored."""
        session = self._active()
        if session is None:
            log.debug("Ignoring answer for %s: session not in progress", question_id)
            return False
        if isinstance(option_index, bool) or not 0 <= option_index < OPTION_COUNT:
            log.debug("Ignoring out-of-range option %r for %s", option_index, question_id)
            return False
        if not session.has_question(question_id):
            log.debug("Ignoring answer for unknown question %s", question_id)
            return False
        session.answers[question_id] = option_index
        return True

    def advance(self, direction: int) -> int:
        session = self._active()
        if session is None:
            return self.session.current_index if self.session else 0
        step = (direction > 0) - (direction < 0)
        target = session.current_index + step
        if 0 <= target < len(session.questions):
            session.current_index = target
        return session.current_index

    def jump_to(self, index: int) -> bool:
        session = self._active()
        if session is None or not 0 <= index < len(session.questions):
            return False
        session.current_index = index
        return True

    def tick(self) -> None:
        session = self._active()
        if session is None or session.remaining_seconds <= 0:
            return
        session.remaining_seconds -= 1
        if session.remaining_seconds == 0:
            self.complete(CompletionReason.TIMEOUT)

    async def _run_timer(self, session: ExamSession) -> None:
        while session.status is SessionStatus.IN_PROGRESS:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    def _stop_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return
        if timer is not asyncio.current_task():
            timer.cancel()

    def complete(
        self, reason: CompletionReason = CompletionReason.MANUAL_SUBMIT
    ) -> ExamResult | None:
        """
        Finish the attempt and fire off result submission.

        Returns the locally scored result, or None when the session is not
        in progress (already completed, never started, or abandoned).
        Must be called on the running event loop.
        """
        session = self._active()
        if session is None:
            return None

        session.status = SessionStatus.COMPLETED
        session.completion_reason = reason
        self.completed_at = datetime.now(timezone.utc)
        self._stop_timer()

        summary = score(session.questions, session.answers)
        result = ExamResult(
            test_name=session.test.name,
            test_type=session.test.test_type,
            score=summary.percentage,
            date=self._today(),
            time_taken=format_duration(session.elapsed_seconds),
            total_questions=summary.total,
            correct_answers=summary.correct_count,
            user_id=self.user.id,
            user_name=self.user.name,
            user_email=self.user.email,
        )
        self.result = result
        self._completed.set()
        self._submit_task = asyncio.get_running_loop().create_task(
            self._submit(result), name=f"exam-submit-{session.test.test_id}"
        )
        log.info(
            "Completed %s %s (%s): %d/%d correct, %d%%",
            session.test.test_type.value,
            session.test.test_id,
            reason.value,
            summary.correct_count,
            summary.total,
            summary.percentage,
        )
        return result

    async def _submit(self, result: ExamResult) -> SubmitOutcome:
        try:
            outcome = await self.sink.submit(result)
        except Exception as exc:
            self.submission_error = SubmissionFailed(str(exc))
            outcome = SubmitOutcome(success=False)
        else:
            if not outcome.success:
                self.submission_error = SubmissionFailed("result sink rejected the result")

        if self.submission_error is not None:
            log.error(
                "Failed to save result for user %s on %s: %s",
                result.user_id,
                result.test_name,
                self.submission_error,
            )
        else:
            log.info("Saved result %s for user %s", outcome.result_id, result.user_id)
        self.submission = outcome
        return outcome

    async def wait_for_completion(self) -> ExamResult | None:
        await self._completed.wait()
        return self.result

    async def wait_for_submission(self) -> SubmitOutcome | None:
        if self._submit_task is None:
            return None
        return await self._submit_task

    def abandon(self) -> None:
        """Drop the session without emitting a result."""
        self._stop_timer()
        session, self.session = self.session, None
        if session is not None and session.status is SessionStatus.IN_PROGRESS:
            log.info(
                "Abandoned %s %s for user %s",
                session.test.test_type.value,
                session.test.test_id,
                self.user.id,
            )
