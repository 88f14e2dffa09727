"""Application configuration and constants."""
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS)
    else:
        base_dir = Path(__file__).resolve().parent.parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


APP_TITLE = "CBDA Exam Simulator API"
STATIC_DIR = _resource_path("static")

# Directories
EXPORTS_DIR = Path(os.environ.get("EXPORTS_DIR", Path.cwd() / "data" / "exports"))
EXPORTS_DIR.mkdir(parents=True, exist_ok=True)

# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'cbda_exams.db'}"
)

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
SESSION_EXTEND_MINUTES = _parse_int_env("SESSION_EXTEND_MINUTES", 60)
VERIFICATION_CODE_TTL_MINUTES = _parse_int_env("VERIFICATION_CODE_TTL_MINUTES", 15)

# Default administrator, created when the user table is empty
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "Admin User")

# Exams
MOCK_DURATION_SECONDS = _parse_int_env("MOCK_DURATION_SECONDS", 7200)
CHAPTER_DURATION_SECONDS = _parse_int_env("CHAPTER_DURATION_SECONDS", 3600)
MOCK_QUESTION_LIMIT = _parse_int_env("MOCK_QUESTION_LIMIT", 75)
COMPLETED_SESSION_RETENTION_SECONDS = _parse_int_env(
    "COMPLETED_SESSION_RETENTION_SECONDS", 60 * 60
)

# Uploads
MAX_UPLOAD_BYTES = _parse_int_env("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)  # 10 MB

# Email delivery (EmailJS REST API)
EMAILJS_API_URL = os.environ.get(
    "EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send"
)
EMAILJS_SERVICE_ID = os.environ.get("EMAILJS_SERVICE_ID")
EMAILJS_TEMPLATE_ID = os.environ.get("EMAILJS_TEMPLATE_ID")
EMAILJS_PUBLIC_KEY = os.environ.get("EMAILJS_PUBLIC_KEY")
EMAILJS_PRIVATE_KEY = os.environ.get("EMAILJS_PRIVATE_KEY")
EMAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME", "CBDA Exam Simulator")

# Cleanup
CLEANUP_INTERVAL_SECONDS = _parse_int_env("CLEANUP_INTERVAL_SECONDS", 24 * 60 * 60)

# CORS
FRONTEND_URL = os.environ.get("FRONTEND_URL")
ALLOWED_ORIGINS = [
    origin
    for origin in ["http://localhost:3000", FRONTEND_URL]
    if origin
]
