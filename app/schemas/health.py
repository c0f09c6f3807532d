"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready."""

    status: str = Field(default="ok", description="Readiness status")
    backend: str = Field(..., description="Active backing store ('firestore' or 'memory')")
    reminders_running: bool = Field(..., description="Whether the reminder sweep task is alive")
    websocket_connections: int = Field(default=0, description="Live dashboard connections")
