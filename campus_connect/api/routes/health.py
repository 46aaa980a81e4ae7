"""Health check endpoint with optional database connectivity check."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from campus_connect.core.config import settings
from campus_connect.core.database import check_db_connected, get_db
from campus_connect.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(request: Request, db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, database connectivity and open hub connections.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    hub = getattr(request.app.state, "chat_hub", None)

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        connections=hub.connection_count if hub is not None else 0,
    )
