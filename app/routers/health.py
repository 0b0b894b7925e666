# app/routers/health.py
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import Settings
from app.core.deps import get_app_settings
from app.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health(
    request: Request,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    """Liveness plus a `SELECT 1` round trip to the database."""
    now = datetime.now(timezone.utc).isoformat()
    try:
        session.connection().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "message": "Server is unhealthy",
                "timestamp": now,
                "error": "Database connection failed",
            },
        )

    engine = request.app.state.engine
    return {
        "success": True,
        "message": "Server is running and healthy",
        "timestamp": now,
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "version": settings.VERSION,
        "environment": settings.APP_ENV,
        "database": {
            "status": "connected",
            "dialect": engine.dialect.name,
            "database": engine.url.database,
        },
    }
