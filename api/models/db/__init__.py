"""Database models."""
from api.models.db.user import AuthSession, User, UserRole
from api.models.db.question_bank import QuestionBank
from api.models.db.result import ExamResultRecord

__all__ = [
    "AuthSession",
    "User",
    "UserRole",
    "QuestionBank",
    "ExamResultRecord",
]
