import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from muse.database import get_db
from muse.schemas import HealthStatus
from muse.schemas.movie_schema import HealthResponse

logger = logging.getLogger("muse.routers.health")

router = APIRouter(tags=["health"])


def database_reachable(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        return False


@router.get("/health", response_model=HealthResponse)
def health(db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc)
    if not database_reachable(db):
        body = HealthResponse(status=HealthStatus.ERROR, timestamp=now)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump(mode="json"))
    return HealthResponse(status=HealthStatus.OK, timestamp=now)
