"""File handling utilities."""
from pathlib import Path

from fastapi import HTTPException, UploadFile


def safe_child_path(base_dir: Path, relative: str) -> Path:
    """Resolve a path under base_dir safely (prevent path traversal)."""
    resolved = (base_dir / relative).resolve()
    if base_dir.resolve() not in resolved.parents and resolved != base_dir.resolve():
        raise HTTPException(status_code=400, detail="Invalid file path")
    return resolved


def read_upload_limited(upload: UploadFile, max_bytes: int) -> bytes:
    """Read an uploaded file, rejecting anything larger than max_bytes."""
    data = upload.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large (limit {max_bytes // (1024 * 1024)} MB)",
        )
    return data


def is_json_upload(upload: UploadFile) -> bool:
    """Accept JSON by content type or by extension."""
    name = (upload.filename or "").lower()
    return upload.content_type == "application/json" or name.endswith(".json")
