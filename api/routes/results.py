"""Exam result endpoints."""
from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse, Response
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.dependencies.auth import get_current_admin, get_current_user
from api.models.db.user import User
from api.models.results import (
    AllResultsResponse,
    CsvExportResponse,
    ExportFile,
    ResultCreate,
    ResultSavedResponse,
    UserResultsResponse,
)
from api.services.export_service import delete_export, export_path, list_exports, save_export
from api.services.result_service import (
    compute_result_stats,
    delete_result,
    filter_by_period,
    list_results,
    save_result,
    summarize_user_results,
)
from api.utils import parse_iso_timestamp
from serialization import results_to_csv

router = APIRouter(prefix="/api/results", tags=["results"])


def _parse_period_bound(name: str, value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return parsed


def _all_results_csv(db: DbSession) -> str:
    return results_to_csv(record.to_dict() for record in list_results(db))


@router.post("", response_model=ResultSavedResponse, status_code=status.HTTP_201_CREATED)
def create_result(
    data: ResultCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> ResultSavedResponse:
    """Save a completed attempt."""
    if not current_user.is_admin:
        # Students can only file results under their own account
        data = data.model_copy(
            update={
                "userId": str(current_user.id),
                "userName": current_user.name,
                "userEmail": current_user.email,
            }
        )
    record = save_result(db, data)
    return ResultSavedResponse(resultId=record.id, timestamp=record.to_dict()["timestamp"])


@router.get("/user/{user_id}", response_model=UserResultsResponse)
def user_results(
    user_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """One student's results, newest first, with a performance summary."""
    if not current_user.is_admin and user_id != str(current_user.id):
        raise HTTPException(status_code=403, detail="Access denied")

    records = list_results(db, user_id=user_id)
    return {
        "success": True,
        "results": [record.to_dict() for record in records],
        "summary": summarize_user_results(records),
    }


@router.get("/admin/all", response_model=AllResultsResponse)
def all_results(
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
) -> dict[str, object]:
    """Every result, optionally limited to a period, with aggregate stats."""
    records = filter_by_period(
        list_results(db),
        _parse_period_bound("startDate", start_date),
        _parse_period_bound("endDate", end_date),
    )
    return {
        "success": True,
        "results": [record.to_dict() for record in records],
        "count": len(records),
        "stats": compute_result_stats(records),
    }


@router.get("/export/csv")
def export_csv(
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
) -> Response:
    """Download every result as CSV."""
    filename = f"cbda-results-{date.today().isoformat()}.csv"
    return Response(
        content=_all_results_csv(db),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/csv-cloud", response_model=CsvExportResponse)
def export_csv_to_store(
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
) -> CsvExportResponse:
    """Write a CSV export to the export store."""
    stored = save_export(_all_results_csv(db))
    return CsvExportResponse(
        message="CSV exported successfully",
        url=stored["url"],
        filename=stored["filename"],
    )


@router.get("/csv-files", response_model=list[ExportFile])
def export_files(
    _admin: Annotated[User, Depends(get_current_admin)],
) -> list[dict[str, object]]:
    """List stored CSV exports, newest first."""
    return list_exports()


@router.get("/csv-files/{filename}")
def download_export(
    filename: str,
    _admin: Annotated[User, Depends(get_current_admin)],
) -> FileResponse:
    """Download a stored CSV export."""
    path = export_path(filename)
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Export not found")
    return FileResponse(path, media_type="text/csv", filename=filename)


@router.delete("/csv-cloud/{filename}")
def remove_export(
    filename: str,
    _admin: Annotated[User, Depends(get_current_admin)],
) -> dict[str, object]:
    """Delete a stored CSV export."""
    if not delete_export(filename):
        raise HTTPException(status_code=404, detail="Export not found")
    return {"success": True, "message": "CSV file deleted successfully"}


@router.delete("/{result_id}")
def remove_result(
    result_id: str,
    _admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Delete a single result."""
    if not delete_result(db, result_id):
        raise HTTPException(status_code=404, detail="Result not found")
    return {"success": True, "message": "Result deleted successfully"}
