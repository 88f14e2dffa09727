"""Server-hosted exam session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies.auth import get_current_user
from api.models.db.user import User
from api.models.sessions import (
    AdvanceRequest,
    AnswerRequest,
    JumpRequest,
    SessionStartRequest,
    SessionState,
)
from api.services.session_service import (
    ExamSessionRegistry,
    get_session_registry,
    session_state,
)
from api.utils import parse_test_type, validate_id
from catalog import make_test_ref
from models import SessionStatus
from session_controller import NoQuestionsAvailable

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

Registry = Annotated[ExamSessionRegistry, Depends(get_session_registry)]
CurrentUser = Annotated[User, Depends(get_current_user)]


@router.post("", response_model=SessionState, status_code=status.HTTP_201_CREATED)
async def start_session(
    data: SessionStartRequest,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Load a question set and start the countdown."""
    test = make_test_ref(
        parse_test_type(data.testType), validate_id("testId", data.testId), data.testName
    )
    try:
        session_id, controller = await registry.start(current_user, test)
    except NoQuestionsAvailable as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None
    return session_state(session_id, controller)


@router.get("/{session_id}", response_model=SessionState)
async def get_session(
    session_id: str,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Current state; includes the result once the session has completed."""
    return session_state(session_id, registry.get(session_id, current_user))


@router.post("/{session_id}/answer", response_model=SessionState)
async def answer_question(
    session_id: str,
    data: AnswerRequest,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Record or overwrite the answer to one question."""
    controller = registry.get(session_id, current_user)
    controller.record_answer(data.questionId, data.optionIndex)
    return session_state(session_id, controller)


@router.post("/{session_id}/advance", response_model=SessionState)
async def advance(
    session_id: str,
    data: AdvanceRequest,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Move to the previous or next question."""
    controller = registry.get(session_id, current_user)
    controller.advance(data.direction)
    return session_state(session_id, controller)


@router.post("/{session_id}/jump", response_model=SessionState)
async def jump(
    session_id: str,
    data: JumpRequest,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Move to a specific question."""
    controller = registry.get(session_id, current_user)
    if not controller.jump_to(data.index) and controller.status is SessionStatus.IN_PROGRESS:
        raise HTTPException(status_code=400, detail="Invalid question index")
    return session_state(session_id, controller)


@router.post("/{session_id}/submit", response_model=SessionState)
async def submit(
    session_id: str,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """
    Finish the attempt and return the score right away.

    Saving runs in the background; ``saved`` and ``resultId`` stay null
    until it finishes and show up on a later GET. Repeated submits return
    the same result.
    """
    controller = registry.get(session_id, current_user)
    controller.complete()
    return session_state(session_id, controller)


@router.delete("/{session_id}")
async def abandon(
    session_id: str,
    current_user: CurrentUser,
    registry: Registry,
) -> dict[str, object]:
    """Discard the session without saving a result."""
    registry.discard(session_id, current_user)
    return {"success": True, "message": "Session abandoned"}
