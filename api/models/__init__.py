"""Pydantic models."""
from api.models.auth import (
    ChangeEmailCodeRequest,
    ChangeEmailRequest,
    MessageResponse,
    ResendCodeRequest,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    VerifyEmailRequest,
)
from api.models.questions import (
    AvailableTest,
    CatalogTest,
    QuestionOut,
    QuestionSetResponse,
    QuestionUploadResponse,
)
from api.models.results import (
    AllResultsResponse,
    CsvExportResponse,
    ExportFile,
    ResultCreate,
    ResultOut,
    ResultSavedResponse,
    ResultStats,
    UserResultSummary,
    UserResultsResponse,
)
from api.models.sessions import (
    AdvanceRequest,
    AnswerRequest,
    JumpRequest,
    SessionQuestion,
    SessionResult,
    SessionStartRequest,
    SessionState,
)

__all__ = [
    "ChangeEmailCodeRequest",
    "ChangeEmailRequest",
    "MessageResponse",
    "ResendCodeRequest",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "VerifyEmailRequest",
    "AvailableTest",
    "CatalogTest",
    "QuestionOut",
    "QuestionSetResponse",
    "QuestionUploadResponse",
    "AllResultsResponse",
    "CsvExportResponse",
    "ExportFile",
    "ResultCreate",
    "ResultOut",
    "ResultSavedResponse",
    "ResultStats",
    "UserResultSummary",
    "UserResultsResponse",
    "AdvanceRequest",
    "AnswerRequest",
    "JumpRequest",
    "SessionQuestion",
    "SessionResult",
    "SessionStartRequest",
    "SessionState",
]
