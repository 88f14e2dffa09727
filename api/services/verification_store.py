"""Short-lived verification codes for registration and email changes."""
import enum
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable

from api.config import VERIFICATION_CODE_TTL_MINUTES


class CodePurpose(str, enum.Enum):
    """What a verification code unlocks."""

    VERIFY_EMAIL = "verify_email"
    CHANGE_EMAIL = "change_email"


@dataclass(frozen=True)
class _Entry:
    code: str
    expires_at: float
    user_id: int | None


def generate_code() -> str:
    """Six-digit numeric code."""
    return str(100000 + secrets.randbelow(900000))


class VerificationCodeStore:
    """
    In-memory key-value store with per-entry TTL.

    Keys are (purpose, email). Codes are single use: a successful check
    removes the entry, as does any lookup that finds it expired.
    """

    def __init__(
        self,
        ttl_seconds: float = VERIFICATION_CODE_TTL_MINUTES * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str], _Entry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(purpose: CodePurpose, email: str) -> tuple[str, str]:
        return purpose.value, email.strip().lower()

    def issue(
        self, purpose: CodePurpose, email: str, user_id: int | None = None
    ) -> str:
        """Store a fresh code for (purpose, email), replacing any previous one."""
        code = generate_code()
        with self._lock:
            self._entries[self._key(purpose, email)] = _Entry(
                code=code,
                expires_at=self._clock() + self.ttl_seconds,
                user_id=user_id,
            )
        return code

    def verify(
        self, purpose: CodePurpose, email: str, code: str, user_id: int | None = None
    ) -> bool:
        """Check and consume a code. Wrong codes leave the entry in place."""
        key = self._key(purpose, email)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._clock() > entry.expires_at:
                del self._entries[key]
                return False
            if user_id is not None and entry.user_id != user_id:
                return False
            if not secrets.compare_digest(entry.code, code.strip()):
                return False
            del self._entries[key]
            return True

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if now > e.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


verification_codes = VerificationCodeStore()


def get_verification_store() -> VerificationCodeStore:
    """FastAPI dependency; override in tests to inject another store."""
    return verification_codes
