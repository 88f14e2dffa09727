"""Service health endpoint."""
from fastapi import APIRouter, HTTPException

from api.database import check_db
from api.utils import utc_now

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health() -> dict[str, object]:
    """Liveness check including database connectivity."""
    if not check_db():
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ok", "timestamp": utc_now(), "database": True}
