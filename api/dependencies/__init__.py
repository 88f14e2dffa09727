"""FastAPI dependencies."""
from api.dependencies.auth import get_current_admin, get_current_user

__all__ = ["get_current_admin", "get_current_user"]
