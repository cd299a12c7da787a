"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from kinext.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database manager not open", "model": ReadinessErrorResponse}},
)
def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the Firestore connection manager is open; 503 otherwise."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None or not manager.is_open:
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                message="Firestore connection is not open"
            ).model_dump(),
        )
    return ReadinessResponse(admin_database=manager.admin_database_name)
