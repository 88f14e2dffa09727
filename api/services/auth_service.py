"""Authentication service for user management and JWT handling."""
import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import func, select
from sqlalchemy.orm import Session as DbSession

from api.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ADMIN_EMAIL,
    ADMIN_NAME,
    ADMIN_PASSWORD,
    ALGORITHM,
    SECRET_KEY,
    SESSION_EXTEND_MINUTES,
)
from api.models.db.user import AuthSession, User, UserRole

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively."""
    return email.strip().lower()


def create_access_token(user_id: int, jti: str | None = None) -> tuple[str, str]:
    """Create a JWT access token.

    Returns:
        Tuple of (token, jti)
    """
    if jti is None:
        jti = str(uuid.uuid4())

    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "jti": jti,
    }
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, jti


def verify_token(token: str) -> dict | None:
    """Verify and decode a JWT token.

    Returns:
        Decoded token payload or None if invalid.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: DbSession, email: str) -> User | None:
    """Get user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: DbSession, user_id: int) -> User | None:
    """Get user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def list_users(db: DbSession) -> list[User]:
    """All users, oldest first."""
    return list(db.execute(select(User).order_by(User.created_at.asc())).scalars().all())


def count_users(db: DbSession, role: UserRole | None = None) -> int:
    """Count users, optionally by role."""
    query = select(func.count(User.id))
    if role is not None:
        query = query.where(User.role == role.value)
    return db.execute(query).scalar() or 0


def create_user(
    db: DbSession,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.STUDENT,
    is_verified: bool = False,
) -> User:
    """Create a new user."""
    hashed = hash_password(password)
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        hashed_password=hashed,
        role=role.value,
        is_verified=is_verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def mark_verified(db: DbSession, user: User) -> User:
    """Mark a user's email address as verified."""
    user.is_verified = True
    db.commit()
    db.refresh(user)
    return user


def change_email(db: DbSession, user: User, new_email: str) -> User:
    """Move a user to a new (already verified) email address."""
    user.email = normalize_email(new_email)
    user.is_verified = True
    db.commit()
    db.refresh(user)
    return user


def seed_admin(db: DbSession) -> User | None:
    """Create the default administrator when no users exist yet."""
    if count_users(db) > 0:
        return None
    user = create_user(
        db,
        ADMIN_NAME,
        ADMIN_EMAIL,
        ADMIN_PASSWORD,
        role=UserRole.ADMIN,
        is_verified=True,
    )
    logger.info("Created default administrator %s", user.email)
    return user


def create_session(
    db: DbSession, user_id: int, token_jti: str, expires_at: datetime
) -> AuthSession:
    """Create a new login session for user."""
    session = AuthSession(
        user_id=user_id,
        token_jti=token_jti,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def issue_token(db: DbSession, user: User) -> str:
    """Create an access token backed by a fresh login session."""
    token, jti = create_access_token(user.id)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    create_session(db, user.id, jti, expires_at)
    return token


def get_active_session(db: DbSession, token_jti: str) -> AuthSession | None:
    """Get an active session by token JTI."""
    now = datetime.now(timezone.utc)
    return (
        db.query(AuthSession)
        .filter(
            AuthSession.token_jti == token_jti,
            AuthSession.is_active == True,  # noqa: E712
            AuthSession.expires_at > now,
        )
        .first()
    )


def extend_session(db: DbSession, session: AuthSession) -> AuthSession:
    """Extend session expiration and update last activity."""
    now = datetime.now(timezone.utc)
    session.last_activity = now
    session.expires_at = now + timedelta(minutes=SESSION_EXTEND_MINUTES)
    db.commit()
    db.refresh(session)
    return session


def invalidate_session(db: DbSession, token_jti: str) -> None:
    """Invalidate a session by token JTI."""
    session = db.query(AuthSession).filter(AuthSession.token_jti == token_jti).first()
    if session:
        session.is_active = False
        db.commit()


def cleanup_expired_sessions(db: DbSession) -> int:
    """Remove expired sessions from database."""
    now = datetime.now(timezone.utc)
    result = db.query(AuthSession).filter(AuthSession.expires_at < now).delete()
    db.commit()
    return result
