"""Validation utilities."""
from pathlib import Path

from fastapi import HTTPException

from models import TestType


def validate_id(name: str, value: str) -> str:
    """Validate ID string (no path traversal)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if Path(cleaned).name != cleaned or "/" in cleaned or "\\" in cleaned:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned


def parse_test_type(value: str) -> TestType:
    """Parse a test type path parameter."""
    try:
        return TestType(value.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=400, detail="testType must be 'chapter' or 'mock'"
        ) from None
