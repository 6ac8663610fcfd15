from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from hostmate.core import database

router = APIRouter()


@router.get("/health", summary="Liveness probe incl. database ping")
def health():
    try:
        with database.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - only when the DB is down
        return JSONResponse({"status": "degraded", "database": "disconnected", "error": type(exc).__name__}, status_code=503)
    return {"status": "ok", "database": "connected"}
