"""Health check endpoints used for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Backend not initialized"}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 once the backend is built; 503 before startup completes."""
    state = request.app.state
    backend = getattr(state, "backend", None)
    if backend is None:
        return JSONResponse(status_code=503, content={"status": "not_ready"})
    reminder_task = getattr(state, "reminder_task", None)
    manager = getattr(state, "ws_manager", None)
    return ReadinessResponse(
        backend=backend.name,
        reminders_running=reminder_task is not None and not reminder_task.done(),
        websocket_connections=await manager.get_connection_count() if manager else 0,
    )
