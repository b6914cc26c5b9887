import structlog
from fastapi import APIRouter
from sqlalchemy import text

from workflow_web.core.database import AsyncSessionLocal

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health/live")
async def liveness():
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness():
    checks = {"database": "unhealthy"}
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as exc:
        logger.warning("readiness_database_check_failed", error=str(exc))

    status = "healthy" if all(value == "healthy" for value in checks.values()) else "unhealthy"
    return {"status": status, "checks": checks}
