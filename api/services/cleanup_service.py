"""Service for cleanup operations."""
import logging
import threading
import time

from api.config import CLEANUP_INTERVAL_SECONDS
from api.database import SessionLocal
from api.services.auth_service import cleanup_expired_sessions
from api.services.verification_store import VerificationCodeStore, verification_codes

logger = logging.getLogger(__name__)


def cleanup_login_sessions() -> int:
    """Remove expired login sessions from database."""
    try:
        db = SessionLocal()
        try:
            deleted = cleanup_expired_sessions(db)
            if deleted > 0:
                logger.info(f"Cleaned up {deleted} expired login sessions")
            return deleted
        finally:
            db.close()
    except Exception as e:
        logger.error(f"Failed to cleanup login sessions: {e}")
        return 0


def cleanup_verification_codes(store: VerificationCodeStore = verification_codes) -> int:
    """Drop verification codes past their TTL."""
    purged = store.purge_expired()
    if purged > 0:
        logger.info(f"Purged {purged} expired verification codes")
    return purged


def schedule_cleanup() -> threading.Thread:
    """Schedule periodic cleanup of expired sessions and codes."""

    def _worker() -> None:
        # Initial delay before first cleanup
        time.sleep(60)
        while True:
            cleanup_login_sessions()
            cleanup_verification_codes()
            time.sleep(CLEANUP_INTERVAL_SECONDS)

    thread = threading.Thread(
        target=_worker,
        name="expired_sessions_cleanup",
        daemon=True,
    )
    thread.start()
    return thread
