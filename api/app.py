"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from api.config import ALLOWED_ORIGINS, APP_TITLE, STATIC_DIR
from api.database import SessionLocal, init_db
from api.routes import admin, auth, health, questions, results, sessions
from api.services.auth_service import seed_admin
from api.services.cleanup_service import schedule_cleanup
from api.services.session_service import exam_sessions
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title=APP_TITLE)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database, seed the administrator and schedule cleanup."""
    init_db()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
    schedule_cleanup()


@app.on_event("shutdown")
async def shutdown_events() -> None:
    """Stop the timers of exam sessions still in progress."""
    exam_sessions.abandon_all()


# Root endpoint
@app.get("/")
def index() -> FileResponse:
    """Serve frontend index.html."""
    index_path = STATIC_DIR / "index.html"
    if not index_path.exists():
        raise HTTPException(status_code=404, detail="Frontend not found")
    return FileResponse(index_path)


# Mount static files
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(questions.router)
app.include_router(results.router)
app.include_router(admin.router)
app.include_router(sessions.router)
