from datetime import datetime, timedelta, timezone

from api.database import SessionLocal, init_db
from api.models.db.user import AuthSession
from api.services import cleanup_service
from api.services.auth_service import create_user
from api.services.verification_store import CodePurpose, VerificationCodeStore


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_cleanup_verification_codes() -> None:
    clock = FakeClock()
    store = VerificationCodeStore(ttl_seconds=10, clock=clock)
    store.issue(CodePurpose.VERIFY_EMAIL, "a@example.com")
    clock.now = 11
    assert cleanup_service.cleanup_verification_codes(store) == 1
    assert len(store) == 0


def test_cleanup_login_sessions_removes_expired_rows() -> None:
    init_db()
    db = SessionLocal()
    try:
        user = create_user(db, "Cleanup", "cleanup@example.com", "secret1")
        now = datetime.now(timezone.utc)
        db.add(AuthSession(user_id=user.id, token_jti="expired-jti", expires_at=now - timedelta(hours=1)))
        db.add(AuthSession(user_id=user.id, token_jti="live-jti", expires_at=now + timedelta(hours=1)))
        db.commit()
    finally:
        db.close()

    assert cleanup_service.cleanup_login_sessions() >= 1

    db = SessionLocal()
    try:
        remaining = {s.token_jti for s in db.query(AuthSession).all()}
    finally:
        db.close()
    assert "expired-jti" not in remaining
    assert "live-jti" in remaining
