"""Administrator dashboard endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.dependencies.auth import get_current_admin
from api.models.auth import UserResponse
from api.models.db.user import User, UserRole
from api.services.auth_service import count_users, list_users
from api.services.question_service import list_banks
from api.services.result_service import compute_result_stats, list_results

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
def users(
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
) -> list[User]:
    """All registered users."""
    return list_users(db)


@router.get("/stats")
def dashboard_stats(
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, int]:
    """Headline numbers for the admin dashboard."""
    result_stats = compute_result_stats(list_results(db))
    banks = list_banks(db)
    return {
        "totalStudents": count_users(db, UserRole.STUDENT),
        "totalTests": result_stats["totalTests"],
        "averageScore": result_stats["averageScore"],
        "passRate": result_stats["passRate"],
        "totalQuestions": sum(bank.question_count for bank in banks),
        "availableTests": sum(1 for bank in banks if bank.question_count > 0),
    }
