"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (backend, WebSocket
manager, reminder sweep).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: backend (unless one is already on app.state, e.g. in
    tests), WebSocket manager, reminder sweep (if enabled). Shutdown cancels
    the sweep and closes backend HTTP clients.
    """
    settings = get_settings()

    # ---- Startup ----
    from app.api.websocket import ConnectionManager
    from app.application.services.notification_service import NotificationService
    from app.application.services.reminder_service import ReminderService
    from app.infrastructure.backend import build_backend

    if getattr(app.state, "backend", None) is None:
        app.state.backend = build_backend(settings)
        app.state.owns_backend = True
    else:
        app.state.owns_backend = False
    backend = app.state.backend
    logger.info("Backend %s ready", backend.name)

    app.state.ws_manager = ConnectionManager()

    app.state.reminder_task = None
    if settings.reminder_enabled:
        reminders = ReminderService(
            backend.tasks,
            NotificationService(backend.notifications),
            window_minutes=settings.reminder_window_minutes,
            auto_overdue=settings.auto_overdue_enabled,
        )
        app.state.reminder_task = asyncio.create_task(
            reminders.run_forever(settings.reminder_interval_seconds)
        )
        logger.info(
            "Reminder sweep started (every %ss, window %s min)",
            settings.reminder_interval_seconds,
            settings.reminder_window_minutes,
        )

    yield

    # ---- Shutdown ----
    reminder_task = getattr(app.state, "reminder_task", None)
    if reminder_task is not None:
        reminder_task.cancel()
        try:
            await reminder_task
        except asyncio.CancelledError:
            pass
        app.state.reminder_task = None
        logger.info("Reminder sweep stopped")

    if app.state.owns_backend:
        await backend.aclose()
        app.state.backend = None
        logger.info("Backend %s closed", backend.name)
