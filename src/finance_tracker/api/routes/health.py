from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.db.session import get_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Liveness check."""
    return {"status": "ok", "message": "Personal Finance Tracker API is running!"}


@router.get("/ready")
async def health_ready(db: AsyncSession = Depends(get_db)):
    """Readiness check with database connection."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not ready",
                "database": "disconnected",
                "error": type(e).__name__,
            },
        )
    return {"status": "ready", "database": "connected"}
