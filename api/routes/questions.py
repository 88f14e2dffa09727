"""Question bank endpoints."""
import json
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session as DbSession

from api.config import MAX_UPLOAD_BYTES
from api.database import get_db
from api.dependencies.auth import get_current_admin, get_current_user
from api.models.db.user import User
from api.models.questions import (
    AvailableTest,
    CatalogTest,
    QuestionSetResponse,
    QuestionUploadResponse,
)
from api.services.question_service import (
    catalog_entries,
    fetch_questions,
    list_banks,
    save_bank,
)
from api.utils import is_json_upload, json_load, parse_test_type, read_upload_limited, validate_id
from serialization import QuestionBankError, parse_question_bank, serialize_question

router = APIRouter(prefix="/api/questions", tags=["questions"])


@router.post("/upload/{test_type}/{test_id}", response_model=QuestionUploadResponse)
def upload_questions(
    test_type: str,
    test_id: str,
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> QuestionUploadResponse:
    """Upload a JSON question bank, replacing the stored one."""
    parsed_type = parse_test_type(test_type)
    test_id = validate_id("testId", test_id)
    if not is_json_upload(file):
        raise HTTPException(status_code=400, detail="Only JSON files are allowed")

    raw = read_upload_limited(file, MAX_UPLOAD_BYTES)
    try:
        data = json_load(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON format") from None

    try:
        questions = parse_question_bank(data, parsed_type)
    except QuestionBankError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None

    bank = save_bank(db, parsed_type, test_id, questions)
    return QuestionUploadResponse(
        message=f"Successfully uploaded {bank.question_count} questions",
        count=bank.question_count,
        testType=parsed_type.value,
        testId=test_id,
    )


@router.get("/available", response_model=list[AvailableTest])
def available_tests(
    _user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> list[AvailableTest]:
    """List stored question banks."""
    return [
        AvailableTest(
            testType=bank.test_type,
            testId=bank.test_id,
            questionCount=bank.question_count,
            filename=f"{bank.key}.json",
        )
        for bank in list_banks(db)
    ]


@router.get("/catalog", response_model=list[CatalogTest])
def catalog(
    db: Annotated[DbSession, Depends(get_db)],
) -> list[dict[str, object]]:
    """Chapter tests and mock exams with their uploaded question counts."""
    return catalog_entries(db)


@router.get("/{test_type}/{test_id}", response_model=QuestionSetResponse)
def get_questions(
    test_type: str,
    test_id: str,
    _user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> QuestionSetResponse:
    """Question set for one attempt, shuffled."""
    parsed_type = parse_test_type(test_type)
    test_id = validate_id("testId", test_id)
    fetched = fetch_questions(db, parsed_type, test_id)
    if not fetched.success:
        raise HTTPException(status_code=404, detail="Questions not found")
    return QuestionSetResponse(
        questions=[serialize_question(q) for q in fetched.questions],
        count=fetched.count,
    )
