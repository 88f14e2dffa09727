"""CSV exports of results, kept in a local object-store directory."""
import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from fastapi import HTTPException

from api.config import EXPORTS_DIR
from api.utils import safe_child_path

logger = logging.getLogger(__name__)

EXPORT_URL_PREFIX = "/api/results/csv-files"


def export_filename() -> str:
    """Timestamped export name, e.g. ``cbda-results-1700000000000.csv``."""
    return f"cbda-results-{int(time.time() * 1000)}.csv"


def export_url(filename: str) -> str:
    return f"{EXPORT_URL_PREFIX}/{filename}"


def export_path(filename: str, base_dir: Path | None = None) -> Path:
    """Resolve an export file name inside the export directory."""
    base_dir = base_dir or EXPORTS_DIR
    if not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Invalid export file name")
    path = safe_child_path(base_dir, filename)
    if path.parent != base_dir.resolve():
        raise HTTPException(status_code=400, detail="Invalid export file name")
    return path


def save_export(csv_text: str, base_dir: Path | None = None) -> dict[str, str]:
    """Write a CSV export and return its name and download URL."""
    base_dir = base_dir or EXPORTS_DIR
    base_dir.mkdir(parents=True, exist_ok=True)
    filename = export_filename()
    path = export_path(filename, base_dir)
    if path.exists():
        filename = f"{path.stem}-{uuid.uuid4().hex[:8]}.csv"
        path = export_path(filename, base_dir)
    path.write_text(csv_text, encoding="utf-8")
    logger.info("CSV uploaded to export store: %s", filename)
    return {"filename": filename, "url": export_url(filename)}


def list_exports(base_dir: Path | None = None) -> list[dict[str, object]]:
    """Stored exports, newest first."""
    base_dir = base_dir or EXPORTS_DIR
    if not base_dir.exists():
        return []
    files = []
    for path in base_dir.glob("*.csv"):
        stat = path.stat()
        files.append(
            {
                "name": path.name,
                "size": stat.st_size,
                "created": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
                "url": export_url(path.name),
            }
        )
    files.sort(key=lambda item: item["created"], reverse=True)
    return files


def delete_export(filename: str, base_dir: Path | None = None) -> bool:
    """Delete a stored export."""
    path = export_path(filename, base_dir)
    if not path.is_file():
        return False
    path.unlink()
    logger.info("CSV deleted from export store: %s", filename)
    return True
