"""Authentication routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from api.config import ACCESS_TOKEN_EXPIRE_MINUTES
from api.database import get_db
from api.dependencies.auth import get_current_user
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
from api.models.db.user import User
from api.services.auth_service import (
    change_email,
    create_user,
    get_user_by_email,
    invalidate_session,
    issue_token,
    mark_verified,
    normalize_email,
    verify_password,
    verify_token,
)
from api.services.email_service import send_verification_email
from api.services.verification_store import (
    CodePurpose,
    VerificationCodeStore,
    get_verification_store,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


def _send_code(
    store: VerificationCodeStore,
    purpose: CodePurpose,
    email: str,
    name: str,
    user_id: int | None = None,
) -> None:
    code = store.issue(purpose, email, user_id=user_id)
    if not send_verification_email(email, name, code):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send verification email",
        )


def _token_response(db: DbSession, user: User) -> TokenResponse:
    return TokenResponse(
        access_token=issue_token(db, user),
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: UserRegister,
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> User:
    """Register a new student and email a verification code."""
    if get_user_by_email(db, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = create_user(db, data.name, data.email, data.password)
    _send_code(store, CodePurpose.VERIFY_EMAIL, user.email, user.name)
    return user


@router.post("/verify", response_model=TokenResponse)
def verify_email(
    data: VerifyEmailRequest,
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> TokenResponse:
    """Confirm an email address and log the user in."""
    user = get_user_by_email(db, data.email)
    if user is None or not store.verify(CodePurpose.VERIFY_EMAIL, user.email, data.code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification code",
        )

    mark_verified(db, user)
    return _token_response(db, user)


@router.post("/resend-code", response_model=MessageResponse)
def resend_code(
    data: ResendCodeRequest,
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> MessageResponse:
    """Send a fresh verification code."""
    user = get_user_by_email(db, data.email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user.is_verified:
        raise HTTPException(status_code=400, detail="Email already verified")

    _send_code(store, CodePurpose.VERIFY_EMAIL, user.email, user.name)
    return MessageResponse(message="Verification code sent")


@router.post("/login", response_model=TokenResponse)
def login(
    data: UserLogin,
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> TokenResponse:
    """Login and get JWT token."""
    user = get_user_by_email(db, data.email)

    if user is None or not verify_password(data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User is inactive",
        )

    if not user.is_verified:
        _send_code(store, CodePurpose.VERIFY_EMAIL, user.email, user.name)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email not verified. A new verification code has been sent.",
        )

    return _token_response(db, user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Logout and invalidate current session."""
    if credentials is None:
        return MessageResponse(message="Already logged out")

    payload = verify_token(credentials.credentials)

    if payload and payload.get("jti"):
        invalidate_session(db, payload["jti"])

    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user info."""
    return current_user


def _ensure_email_free(db: DbSession, email: str, user: User) -> None:
    existing = get_user_by_email(db, email)
    if existing is not None and existing.id != user.id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already in use",
        )


@router.post("/change-email/request", response_model=MessageResponse)
def request_email_change(
    data: ChangeEmailCodeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> MessageResponse:
    """Email a confirmation code to the new address."""
    new_email = normalize_email(data.new_email)
    if new_email == current_user.email:
        raise HTTPException(status_code=400, detail="New email matches current email")
    _ensure_email_free(db, new_email, current_user)

    _send_code(
        store, CodePurpose.CHANGE_EMAIL, new_email, current_user.name, user_id=current_user.id
    )
    return MessageResponse(message="Verification code sent to new email")


@router.post("/change-email", response_model=UserResponse)
def confirm_email_change(
    data: ChangeEmailRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    store: Annotated[VerificationCodeStore, Depends(get_verification_store)],
) -> User:
    """Switch to the new address once its code is confirmed."""
    new_email = normalize_email(data.new_email)
    if not store.verify(CodePurpose.CHANGE_EMAIL, new_email, data.code, user_id=current_user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification code",
        )
    _ensure_email_free(db, new_email, current_user)

    return change_email(db, current_user, new_email)
