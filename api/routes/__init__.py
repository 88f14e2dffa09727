"""API route modules."""
from api.routes import admin, auth, health, questions, results, sessions

__all__ = ["admin", "auth", "health", "questions", "results", "sessions"]
